"""
neighborhood.py
===============

Window extraction around a single pixel of a luminance matrix.

Public API
----------
get_neighborhood(matrix: NDArray[np.uint8],
                 y: int, x: int,
                 size: int,
                 wrap: bool = False) -> np.ma.MaskedArray

has_sentinel(neighborhood: np.ma.MaskedArray) -> bool

Notes
-----
* The window is visited row‑major (top‑left → bottom‑right) so slot *i* of the
  result lines up with weight *i* of a flat mask.
* Out‑of‑bounds slots are either wrapped toroidally (``wrap=True``) or left
  **masked**.  A masked slot is the unresolved marker; no numeric sentinel is
  ever stored in the data.
* The call never raises for any (y, x), inside or outside the image.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

__all__ = ["Coord", "window_offsets", "get_neighborhood", "has_sentinel"]

Coord = Tuple[int, int]


def window_offsets(size: int) -> np.ndarray:
    """Return the 1‑D offsets ``[-group, ..., +group]`` of an odd window."""
    if size < 1 or size % 2 == 0:
        raise ValueError("size must be an odd integer ≥ 1.")
    group = (size - 1) // 2
    return np.arange(-group, group + 1)


def get_neighborhood(
    matrix: np.ndarray,
    y: int,
    x: int,
    size: int,
    wrap: bool = False,
) -> np.ma.MaskedArray:
    """
    Gets a pixel's neighborhood.

    Parameters
    ----------
    matrix : np.ndarray
        2‑D luminance matrix (H×W).
    y, x : int
        Centre pixel (row, col).  May lie anywhere.
    size : int
        Window side length (3, 5, 7, ...).
    wrap : bool, default False
        Read out‑of‑bounds slots from the opposite edge (periodic image)
        instead of masking them.

    Returns
    -------
    np.ma.MaskedArray
        1‑D int64 array of ``size**2`` values; unresolved slots are masked.
    """
    if matrix.ndim != 2:
        raise ValueError("matrix must be 2‑D.")

    offsets = window_offsets(size)
    h, w = matrix.shape

    rows = np.repeat(y + offsets, size)
    cols = np.tile(x + offsets, size)

    if wrap:
        values = matrix[rows % h, cols % w].astype(np.int64)
        return np.ma.MaskedArray(values, mask=np.zeros(values.size, dtype=bool))

    inside = (rows >= 0) & (rows < h) & (cols >= 0) & (cols < w)
    values = np.zeros(rows.size, dtype=np.int64)
    values[inside] = matrix[rows[inside], cols[inside]]
    return np.ma.MaskedArray(values, mask=~inside)


def has_sentinel(neighborhood: np.ma.MaskedArray) -> bool:
    """True if any slot of *neighborhood* is still unresolved."""
    return bool(np.ma.getmaskarray(neighborhood).any())
