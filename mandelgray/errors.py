"""Exceptions raised by the rendering core."""


class MandelbrotError(Exception):
    """Base class for errors raised by :mod:`mandelgray`."""


class InvalidGeometryError(MandelbrotError, ValueError):
    """A viewport or image size that cannot be sampled."""


class PixelOutOfRangeError(MandelbrotError, IndexError):
    """A pixel coordinate that lies outside the image."""
