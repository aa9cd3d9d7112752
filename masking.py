"""
masking.py
==========

Weighted‑sum of a flat kernel ("mask") against a resolved neighborhood.

Public API
----------
validate_mask(mask, size) -> NDArray[np.int64]
apply_mask(mask, neighborhood) -> int
apply_mask_windows(mask, windows) -> NDArray[np.int64]
trunc_div(a, b) -> int

Notes
-----
* result = Σ mask[i]·nbhd[i]  div  Σ mask[i]
* Division truncates toward zero (−7 div 2 == −3), for every pixel.
* No clamping happens here; out‑of‑range results are returned as‑is and the
  storage policy is applied by the orchestrator.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

__all__ = [
    "MalformedMaskError",
    "validate_mask",
    "apply_mask",
    "apply_mask_windows",
    "trunc_div",
]


class MalformedMaskError(ValueError):
    """Raised for masks that cannot be applied (zero sum, wrong length, ...)."""


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _as_weights(mask: Sequence[int] | np.ndarray) -> np.ndarray:
    weights = np.asarray(mask)
    if weights.ndim != 1:
        weights = weights.ravel()
    if weights.size and not np.issubdtype(weights.dtype, np.integer):
        if not np.all(np.equal(np.mod(weights, 1), 0)):
            raise MalformedMaskError("Mask weights must be integers.")
    return weights.astype(np.int64)


def validate_mask(mask: Sequence[int] | np.ndarray, size: int) -> np.ndarray:
    """
    Check that *mask* can be applied with a ``size × size`` window.

    Parameters
    ----------
    mask : sequence of int
        Flat (row‑major) or 2‑D kernel weights.
    size : int
        Window side length; odd and ≥ 1.

    Returns
    -------
    np.ndarray
        Flat int64 copy of the weights.

    Raises
    ------
    MalformedMaskError
        Wrong length, non‑integer weights or zero weight sum.
    ValueError
        Invalid *size*.
    """
    if size < 1 or size % 2 == 0:
        raise ValueError("size must be an odd integer ≥ 1.")

    weights = _as_weights(mask)
    if weights.size != size * size:
        raise MalformedMaskError(
            f"Mask has {weights.size} weights, a {size}x{size} window needs {size * size}."
        )
    if int(weights.sum()) == 0:
        raise MalformedMaskError(
            "Mask weights sum to 0; normalized filtering is undefined for this mask."
        )
    return weights


def apply_mask(
    mask: Sequence[int] | np.ndarray,
    neighborhood: Sequence[int] | np.ndarray,
) -> int:
    """
    Applies a mask to a neighborhood.

    Parameters
    ----------
    mask : sequence of int
        Kernel weights, same scan order as *neighborhood*.
    neighborhood : sequence of int or np.ndarray
        Fully resolved pixel values.

    Returns
    -------
    int
        Σ(mask·neighborhood) divided by Σ(mask), truncated toward zero.
    """
    weights = _as_weights(mask)
    if np.ma.isMaskedArray(neighborhood):
        if np.ma.getmaskarray(neighborhood).any():
            raise ValueError("Neighborhood still contains unresolved slots.")
        values = np.ma.getdata(neighborhood)
    else:
        values = np.asarray(neighborhood)
    values = values.astype(np.int64).ravel()

    if weights.size != values.size:
        raise MalformedMaskError(
            f"Mask length {weights.size} does not match neighborhood length {values.size}."
        )

    mask_sum = int(weights.sum())
    if mask_sum == 0:
        raise MalformedMaskError(
            "Mask weights sum to 0; cannot normalize the weighted pixel sum."
        )

    pixel_sum = int(np.dot(weights, values))
    return trunc_div(pixel_sum, mask_sum)


def apply_mask_windows(
    mask: Sequence[int] | np.ndarray,
    windows: np.ndarray,
) -> np.ndarray:
    """
    Vectorised `apply_mask` over many windows at once.

    Parameters
    ----------
    mask : sequence of int
        Kernel weights, ``size**2`` values (flat or size×size).
    windows : np.ndarray
        Array of shape (..., size, size), e.g. a
        `numpy.lib.stride_tricks.sliding_window_view` of the matrix.

    Returns
    -------
    np.ndarray
        int64 array of shape ``windows.shape[:-2]`` with the same
        truncate‑toward‑zero results `apply_mask` gives per window.
    """
    weights = _as_weights(mask)
    kernel_shape = windows.shape[-2:]
    if windows.ndim < 2 or kernel_shape[0] * kernel_shape[1] != weights.size:
        raise MalformedMaskError(
            f"Mask length {weights.size} does not match window shape {kernel_shape}."
        )

    mask_sum = int(weights.sum())
    if mask_sum == 0:
        raise MalformedMaskError(
            "Mask weights sum to 0; cannot normalize the weighted pixel sum."
        )

    # one strided pass per weight, no (…, size, size) int64 copy
    sums = np.zeros(windows.shape[:-2], dtype=np.int64)
    for (i, j), w in zip(np.ndindex(*kernel_shape), weights):
        if w:
            sums += int(w) * windows[..., i, j].astype(np.int64)

    q = np.abs(sums) // abs(mask_sum)
    return np.where((sums >= 0) == (mask_sum > 0), q, -q)
