from pathlib import Path

import numpy as np
import PIL.Image
import pytest

import render as cli
from mandelgray import Viewport, render


def parse(*args):
    parser = cli.build_parser()
    return parser, parser.parse_args(list(args))


def test_defaults_follow_the_classic_framing():
    parser, opt = parse()
    params = cli.resolve_parameters(opt, parser)
    assert (params.width, params.height, params.iteration_max) == (1920, 1080, 500)
    assert params.viewport == Viewport.from_scale(0j, 0.5625)


def test_corner_viewport():
    parser, opt = parse("--top-left=-2+1.2i", "--bottom-right=0.5-1.2i")
    assert cli.resolve_viewport(opt, parser) == Viewport.from_corners(complex(-2.0, 1.2), complex(0.5, -1.2))


def test_center_viewport():
    parser, opt = parse("--center", "-0.75", "--extent", "2.5-2.4i")
    assert cli.resolve_viewport(opt, parser) == Viewport.from_corners(complex(-2.0, 1.2), complex(0.5, -1.2))


@pytest.mark.parametrize(
    "args",
    [
        ("--top-left=-2+1i", "--center", "0", "--extent", "1-1i"),
        ("--top-left=-2+1i",),
        ("--extent", "1-1i"),
        ("--center", "0", "--extent", "0-1i"),
        ("--origin", "0", "--bottom-right", "1-1i"),
    ],
)
def test_conflicting_or_incomplete_viewports_exit(args):
    parser, opt = parse(*args)
    with pytest.raises(SystemExit):
        cli.resolve_viewport(opt, parser)


def test_default_output_name():
    parser, opt = parse("--width", "30", "--height", "20", "--iteration-max", "64")
    params = cli.resolve_parameters(opt, parser)
    config = cli.resolve_output_config(opt, params, parser)
    assert config.image_path.name == "mandelbrot_30x20_64_iter.png"
    assert config.image_format == "png"


def test_output_suffix_picks_format(tmp_path):
    parser, opt = parse("--output", str(tmp_path / "frame.jpg"))
    params = cli.resolve_parameters(opt, parser)
    config = cli.resolve_output_config(opt, params, parser)
    assert config.image_format == "jpg"


def test_output_conflicting_with_format_exits(tmp_path):
    parser, opt = parse("--output", str(tmp_path / "frame.jpg"), "--format", "bmp")
    params = cli.resolve_parameters(opt, parser)
    with pytest.raises(SystemExit):
        cli.resolve_output_config(opt, params, parser)


def test_main_writes_the_image(tmp_path, capsys):
    output = tmp_path / "out.png"
    cli.main([
        "--width", "12", "--height", "9", "--iteration-max", "40",
        "--top-left=-2+1.2i", "--bottom-right=0.5-1.2i",
        "--backend", "serial", "--output", str(output),
    ])
    assert Path(capsys.readouterr().out.strip()) == output.resolve()
    expected = render(12, 9, Viewport.from_corners(complex(-2.0, 1.2), complex(0.5, -1.2)), 40)
    with PIL.Image.open(output) as image:
        assert np.array_equal(np.asarray(image.convert("RGB")), expected.to_array())


def test_main_rejects_bad_sizes():
    with pytest.raises(SystemExit):
        cli.main(["--width", "0", "--no-save"])
    with pytest.raises(SystemExit):
        cli.main(["--iteration-max", "-5", "--no-save"])
    with pytest.raises(SystemExit):
        cli.main(["--workers", "0", "--no-save"])


def test_main_without_saving(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    cli.main(["--width", "4", "--height", "3", "--iteration-max", "5", "--no-save", "--julia=-0.8+0.156i"])
    assert capsys.readouterr().out == ""
    assert list(tmp_path.iterdir()) == []


def test_verbose_main_times_image_conversion_separately(tmp_path, capsys):
    output = tmp_path / "timed.png"
    cli.main([
        "--width", "6", "--height", "4", "--iteration-max", "10",
        "--backend", "serial", "--output", str(output), "-v",
    ])
    cli.VERBOSE = False
    lines = capsys.readouterr().out.splitlines()
    assert Path(lines[0]) == output.resolve()
    labels = [line.split(":")[0] for line in lines[1:]]
    assert labels == [
        "Resolution",
        "Number of iterations",
        "Viewport",
        "Calculating pixel colors",
        "Copying raw pixels into image",
        "Saving",
        "Grand total",
    ]
