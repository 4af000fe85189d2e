"""Average-colour fingerprints and the RGB distance used to compare them."""

from __future__ import annotations

import numpy as np

Color = tuple[int, int, int]


def _as_rgb(image: np.ndarray) -> np.ndarray:
    """Coerce an (H, W), (H, W, 1), (H, W, 3) or (H, W, 4) array to (H, W, 3)."""
    arr = np.asarray(image)
    if arr.ndim == 2:
        arr = arr[:, :, np.newaxis]
    if arr.shape[2] == 1:
        return np.repeat(arr, 3, axis=2)
    return arr[:, :, :3]


def average_color(image: np.ndarray) -> Color:
    """Mean RGB value of *image*, floored to integers.

    Channel sums are accumulated as 64-bit integers.  A zero-sized image
    divides by one instead of zero and therefore yields ``(0, 0, 0)``.
    """
    rgb = _as_rgb(image)
    count = max(1, rgb.shape[0] * rgb.shape[1])
    sums = rgb.reshape(-1, 3).astype(np.uint64).sum(axis=0)
    r, g, b = (int(s) // count for s in sums)
    return (r & 0xFF, g & 0xFF, b & 0xFF)


def color_distance(a: Color, b: Color) -> int:
    """Squared Euclidean distance between two RGB colours."""
    dr = int(a[0]) - int(b[0])
    dg = int(a[1]) - int(b[1])
    db = int(a[2]) - int(b[2])
    return dr * dr + dg * dg + db * db


def color_distances(colors: np.ndarray, target: Color) -> np.ndarray:
    """:func:`color_distance` from every row of an (N, 3) array to *target*.

    Returns:
        (N,) int64 array.
    """
    diff = np.asarray(colors, dtype=np.int64) - np.asarray(target, dtype=np.int64)
    return np.sum(diff * diff, axis=1)
