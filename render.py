import logging
import os
import sys
import time
import warnings
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


from mandelgray import (
    BACKENDS,
    DEFAULT_BACKEND,
    CLAMP,
    MANDELBROT,
    WRAP,
    JuliaFamily,
    MandelbrotError,
    RenderParameters,
    Viewport,
    render_frame,
)
from mandelgray.image_io import default_filename, to_image, write_single_image
from mandelgray.prompt import parse_complex, prompt_parameters


@dataclass(frozen=True)
class OutputConfig:
    image_path: Path | None
    image_format: str
    show: bool


def build_parser():
    parser = ArgumentParser(description="Render a grayscale escape-time image of the Mandelbrot set.")

    parser.add_argument('--width', type=int,
                        dest='width', help='image width in pixels',
                        metavar='WIDTH', default=1920)

    parser.add_argument('--height', type=int,
                        dest='height', help='image height in pixels',
                        metavar='HEIGHT', default=1080)

    parser.add_argument('--iteration-max', type=int,
                        dest='iteration_max', help='maximum number of iterations before a point counts as inside the set',
                        metavar='ITERATION_MAX', default=500)

    parser.add_argument('--top-left', type=parse_complex,
                        dest='top_left', help='top-left corner of the viewport, e.g. --top-left=-2+1.2i',
                        metavar='COMPLEX')

    parser.add_argument('--bottom-right', type=parse_complex,
                        dest='bottom_right', help='bottom-right corner of the viewport, e.g. --bottom-right=0.5-1.2i',
                        metavar='COMPLEX')

    parser.add_argument('--center', type=parse_complex,
                        dest='center', help='center of the viewport; requires --extent',
                        metavar='COMPLEX')

    parser.add_argument('--extent', type=parse_complex,
                        dest='extent', help='complex (width, height) of the viewport, e.g. "2.5-2.4i"',
                        metavar='COMPLEX')

    parser.add_argument('--origin', type=parse_complex,
                        dest='origin', help='point the default framing is centered on. Default: 0',
                        metavar='COMPLEX')

    parser.add_argument('--scale-factor', type=float,
                        dest='scale_factor', help='multiplier applied to the default framing; < 1 zooms in. Default: 0.5625',
                        metavar='SCALE_FACTOR')

    parser.add_argument('--julia', type=parse_complex, default=None,
                        help='render the Julia set for this parameter instead of the Mandelbrot set')

    parser.add_argument('--backend', choices=BACKENDS, default=DEFAULT_BACKEND,
                        help='execution strategy for the pixel pipeline')

    parser.add_argument('--workers', type=int, default=None,
                        help='worker count for the processes and threads backends. Default: all cores')

    parser.add_argument('--clamp', action='store_true',
                        help='saturate escape counts above 255 instead of wrapping them into bands')

    parser.add_argument('--output', dest='output', type=str,
                        help='destination image file. Default: mandelbrot_<W>x<H>_<N>_iter.<format>')

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for the image. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--no-save', dest='save', action='store_false',
                        help='skip writing the image file')

    parser.add_argument('--show', action='store_true',
                        help='display the result in a matplotlib window')

    parser.add_argument('--interactive', action='store_true',
                        help='ask for size, scale factor, origin and iteration count on the terminal')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including timings and TensorFlow diagnostics.')

    return parser


def resolve_viewport(opt, parser: ArgumentParser) -> Viewport:
    corners = opt.top_left is not None or opt.bottom_right is not None
    centered = opt.center is not None or opt.extent is not None
    scaled = opt.origin is not None or opt.scale_factor is not None

    if sum((corners, centered, scaled)) > 1:
        parser.error("choose one of --top-left/--bottom-right, --center/--extent or --origin/--scale-factor.")

    try:
        if corners:
            if opt.top_left is None or opt.bottom_right is None:
                parser.error("--top-left and --bottom-right must be given together.")
            return Viewport.from_corners(opt.top_left, opt.bottom_right)
        if centered:
            if opt.center is None or opt.extent is None:
                parser.error("--center and --extent must be given together.")
            return Viewport.from_center(opt.center, opt.extent)
        origin = opt.origin if opt.origin is not None else 0j
        scale_factor = opt.scale_factor if opt.scale_factor is not None else 0.5625
        return Viewport.from_scale(origin, scale_factor)
    except MandelbrotError as exc:
        parser.error(str(exc))


def resolve_output_config(opt, params: RenderParameters, parser: ArgumentParser) -> OutputConfig:
    image_format = (opt.format or "png").lower().lstrip(".") or "png"

    if not opt.save:
        if opt.output:
            parser.error("--output cannot be combined with --no-save.")
        return OutputConfig(image_path=None, image_format=image_format, show=bool(opt.show))

    if opt.output:
        output_path = Path(opt.output).expanduser()
        if output_path.exists() and output_path.is_dir():
            output_path = output_path / default_filename(params.width, params.height, params.iteration_max, image_format)
        elif output_path.suffix:
            if output_path.suffix.lower() != f".{image_format}" and opt.format == parser.get_default("format"):
                image_format = output_path.suffix.lower().lstrip(".")
            elif output_path.suffix.lower() != f".{image_format}":
                parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
        else:
            output_path = output_path.with_suffix(f".{image_format}")
    else:
        output_path = Path(default_filename(params.width, params.height, params.iteration_max, image_format))

    return OutputConfig(image_path=output_path.resolve(), image_format=image_format, show=bool(opt.show))


def resolve_parameters(opt, parser: ArgumentParser) -> RenderParameters:
    if opt.interactive:
        return prompt_parameters()

    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.iteration_max < 0:
        parser.error("--iteration-max must not be negative.")

    return RenderParameters(
        width=opt.width,
        height=opt.height,
        viewport=resolve_viewport(opt, parser),
        iteration_max=opt.iteration_max,
    )


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    if VERBOSE:
        logging.basicConfig(level=logging.WARNING, format="%(name)s: %(message)s")
        logging.getLogger("mandelgray").setLevel(logging.DEBUG)

    if opt.workers is not None and opt.workers < 1:
        parser.error("--workers must be at least 1.")

    grand_start = time.perf_counter()
    params = resolve_parameters(opt, parser)
    output_config = resolve_output_config(opt, params, parser)
    family = JuliaFamily(opt.julia) if opt.julia is not None else MANDELBROT

    start = time.perf_counter()
    try:
        buffer = render_frame(
            params,
            family=family,
            backend=opt.backend,
            workers=opt.workers,
            narrowing=CLAMP if opt.clamp else WRAP,
        )
    except MandelbrotError as exc:
        parser.error(str(exc))
    pixel_delta = time.perf_counter() - start

    image_delta = 0.0
    save_delta = 0.0
    if output_config.image_path is not None:
        start = time.perf_counter()
        image = to_image(buffer)
        image_delta = time.perf_counter() - start

        start = time.perf_counter()
        write_single_image(image, output_config.image_path, output_config.image_format)
        save_delta = time.perf_counter() - start
        print(output_config.image_path)

    log("Resolution: {0}x{1}".format(params.width, params.height))
    log("Number of iterations: {0}".format(params.iteration_max))
    log("Viewport: {0} to {1}".format(params.viewport.top_left, params.viewport.bottom_right))
    log("Calculating pixel colors: {0:.3f}s".format(pixel_delta))
    log("Copying raw pixels into image: {0:.3f}s".format(image_delta))
    log("Saving: {0:.3f}s".format(save_delta))
    log("Grand total: {0:.3f}s".format(time.perf_counter() - grand_start))

    if output_config.show:
        from mandelgray.display import show

        show(buffer, title="{0}x{1}, {2} iterations".format(params.width, params.height, params.iteration_max))


if __name__ == '__main__':
    main()
