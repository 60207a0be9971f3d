# debug.py
# Quick look at a buffer without opening the written file. Also handy from a
# debugger prompt: debug.draw_array(renderer.image.pixels)

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from matplotlib.colors import Normalize

def draw_array(image: np.ndarray, title: str | None = None):
    h, w = image.shape[:2]
    fig, ax = plt.subplots()

    if image.ndim == 2 or (image.ndim == 3 and image.shape[2] == 1):
        # Signed distances, coverage, single channels...
        norm = Normalize(vmin=image.min(), vmax=image.max())
        ax.imshow(image.squeeze(), norm=norm)
    elif image.ndim == 3 and image.shape[2] == 3:
        if image.dtype == np.uint8:
            ax.imshow(image)  # already 0-255, no rescale so black stays black
        else:
            ax.imshow(Normalize(vmin=image.min(), vmax=image.max())(image))
    else:
        raise ValueError(f"Unsupported shape {image.shape}")

    rect = patches.Rectangle((0, 0), w-1, h-1, linewidth=1, edgecolor='red', facecolor='none')
    ax.add_patch(rect)
    ax.axis('off')
    if title:
        ax.set_title(title)

    # Show the raw value under the cursor
    def format_coord(x: float, y: float) -> str:
        xi, yi = int(x + 0.5), int(y + 0.5)
        if 0 <= yi < h and 0 <= xi < w:
            val = image[yi, xi]
            return f"x={xi}, y={yi}, val={val}"
        return ""

    ax.format_coord = format_coord
    plt.show()
    return fig
