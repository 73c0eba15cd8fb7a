"""On-screen presentation of color buffers through matplotlib."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .color import ColorBuffer


def to_display_array(buffer: ColorBuffer) -> np.ndarray:
    """``(height, width, 4)`` RGBA array with full opacity, as image widgets expect."""

    return buffer.to_rgba_array()


def show(buffer: ColorBuffer, title: Optional[str] = None, *, block: bool = True):
    """Draw ``buffer`` in a matplotlib window and return the figure."""

    import matplotlib.pyplot as plt

    fig, ax = plt.subplots()
    ax.imshow(to_display_array(buffer), interpolation="nearest")
    ax.set_axis_off()
    if title:
        ax.set_title(title)
    fig.tight_layout()
    plt.show(block=block)
    return fig
