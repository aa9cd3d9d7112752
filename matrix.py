"""
matrix.py
=========

Reshape a flat, row‑major luminance buffer into a 2‑D pixel matrix.

Public API
----------
build_matrix(buffer, width, strict=False) -> NDArray[np.uint8]   # (H, W)

Notes
-----
* H = len(buffer) // width.  When *width* does not divide the buffer length
  the trailing values are dropped and a warning is logged; pass
  ``strict=True`` to raise `DimensionMismatchError` instead.
* The returned matrix is read‑only: the filter scan never writes to it.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

__all__ = ["DimensionMismatchError", "build_matrix"]

logger = logging.getLogger("matrix")
logger.setLevel(logging.INFO)


class DimensionMismatchError(ValueError):
    """Raised when the buffer length is not a multiple of the image width."""


def _as_flat_u8(buffer: bytes | bytearray | Sequence[int] | np.ndarray) -> np.ndarray:
    if isinstance(buffer, (bytes, bytearray, memoryview)):
        return np.frombuffer(bytes(buffer), dtype=np.uint8)

    arr = np.asarray(buffer)
    if arr.size and not np.issubdtype(arr.dtype, np.integer):
        if not np.all(np.equal(np.mod(arr, 1), 0)):
            raise ValueError("Luminance values must be integers.")
    if arr.size and (arr.min() < 0 or arr.max() > 255):
        raise ValueError("Luminance values must lie in [0, 255].")
    return arr.astype(np.uint8, copy=False).ravel()


def build_matrix(
    buffer: bytes | bytearray | Sequence[int] | np.ndarray,
    width: int,
    strict: bool = False,
) -> np.ndarray:
    """
    Convert a 1‑D list of pixels into a matrix that follows the image shape.

    Parameters
    ----------
    buffer : bytes or sequence of int or np.ndarray
        Flat luminance values, row‑major.
    width : int
        Image width (pixels per row). Must be > 0.
    strict : bool, default False
        Raise instead of silently dropping a trailing partial row.

    Returns
    -------
    np.ndarray
        uint8 array of shape (len(buffer) // width, width).
    """
    if width <= 0:
        raise ValueError("width must be > 0.")

    flat = _as_flat_u8(buffer)
    height, leftover = divmod(flat.size, width)

    if leftover:
        if strict:
            raise DimensionMismatchError(
                f"Buffer length {flat.size} is not a multiple of width {width}."
            )
        logger.warning(
            f"Buffer length {flat.size} is not a multiple of width {width}; "
            f"dropping {leftover} trailing value(s)."
        )

    matrix = flat[: height * width].reshape(height, width).copy()
    matrix.setflags(write=False)
    return matrix
