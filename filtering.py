"""
filtering.py
============

High‑level orchestration of a spatial (mask) filter over one image.

The `operate()` function wires together all previously implemented modules:

1. Decode the encoded image bytes (codec).
2. Extract the luminance plane as a flat uint8 buffer.
3. Build the H×W matrix.
4. Filter the matrix:
   a. interior windows in one vectorised pass over a strided window view;
   b. border windows (or every window, toroidally, when the edge solution
      wraps) through neighborhood extraction and the edge solution;
   c. weighted sum divided by the weight sum → raw integer.
5. Map raw values into 8‑bit storage (overflow policy).
6. Re‑encode width, height and the output buffer in the source format.

Public API
----------
filter_matrix(matrix, mask, size, edge_solution) -> NDArray[np.int64]
finalize_pixels(values, overflow="clip") -> NDArray[np.uint8]
operate(image, mask, size, edge_solution, cfg=None) -> bytes | None
operate_named(image, filter_name, edge_solution=None, cfg=None) -> bytes | None

`FilterConfig` holds the tunable run options.  Sensible defaults are
provided, so `operate(data, mask, 3, EdgeSolution.REPLICATION)` works without
passing a config.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

import codec
from edge_solutions import EdgeContext, EdgeSolution
from io_utils import timer
from kernels import get_kernel
from masking import apply_mask_windows, validate_mask
from matrix import build_matrix
from neighborhood import get_neighborhood, has_sentinel

__all__ = [
    "FilterConfig",
    "filter_matrix",
    "finalize_pixels",
    "operate",
    "operate_named",
]

logger = logging.getLogger("filtering")
logger.setLevel(logging.INFO)

Overflow = Literal["clip", "wrap"]


# --------------------------------------------------------------------------- #
# Dataclasses
# --------------------------------------------------------------------------- #
@dataclass(slots=True)
class FilterConfig:
    # Storage of raw results: "clip" → clamp to [0, 255], "wrap" → low 8 bits
    overflow: Overflow = "clip"

    # Raise instead of dropping a trailing partial row
    strict_dimensions: bool = False


# --------------------------------------------------------------------------- #
# Core scan
# --------------------------------------------------------------------------- #
@timer
def filter_matrix(
    matrix: np.ndarray,
    mask: Sequence[int] | np.ndarray,
    size: int,
    edge_solution: EdgeSolution,
) -> np.ndarray:
    """
    Apply *mask* to every pixel of *matrix*.

    Windows that stay inside the image are weighted in one vectorised pass.
    Only the border band (pixels closer than ``size // 2`` to an edge) goes
    through `get_neighborhood` and the edge solution.  A wrapping edge
    solution has no border band: the whole matrix is read toroidally.

    Parameters
    ----------
    matrix : np.ndarray
        2‑D uint8 luminance matrix (H×W).
    mask : sequence of int
        Flat kernel weights, length ``size**2``.
    size : int
        Neighborhood side length (3, 5, 7, ...).
    edge_solution : EdgeSolution
        Boundary policy used for the whole image.

    Returns
    -------
    np.ndarray
        int64 array (H×W) of raw, unclamped results.
    """
    if matrix.ndim != 2:
        raise ValueError("matrix must be 2‑D.")
    weights = validate_mask(mask, size)

    h, w = matrix.shape
    group = (size - 1) // 2
    out = np.empty((h, w), dtype=np.int64)
    if h == 0 or w == 0:
        return out

    if edge_solution.wraps_extraction:
        rows = np.arange(-group, h + group) % h
        cols = np.arange(-group, w + group) % w
        torus = matrix[np.ix_(rows, cols)]
        out[:] = apply_mask_windows(weights, sliding_window_view(torus, (size, size)))
        logger.info(
            f"Filtered {h}x{w} matrix with {size}x{size} mask ({edge_solution})"
        )
        return out

    if h >= size and w >= size:
        interior = sliding_window_view(matrix, (size, size))
        out[group:h - group, group:w - group] = apply_mask_windows(weights, interior)

    border = np.ones((h, w), dtype=bool)
    border[group:h - group, group:w - group] = False
    ys, xs = np.nonzero(border)

    resolved = 0
    windows = np.empty((ys.size, size * size), dtype=np.int64)
    for k, (y, x) in enumerate(zip(ys.tolist(), xs.tolist())):
        neighborhood = get_neighborhood(matrix, y, x, size)

        if edge_solution.resolves_sentinels and has_sentinel(neighborhood):
            neighborhood = edge_solution.resolve(
                EdgeContext(
                    center_value=int(matrix[y, x]),
                    desired_length=size * size,
                    neighborhood=neighborhood,
                    matrix=matrix,
                    position=(y, x),
                )
            )
            resolved += 1
        elif has_sentinel(neighborhood):
            raise ValueError(f"{edge_solution} left unresolved slots at {(y, x)}.")

        windows[k] = np.ma.getdata(neighborhood)

    if ys.size:
        out[ys, xs] = apply_mask_windows(weights, windows.reshape(-1, size, size))

    logger.info(
        f"Filtered {h}x{w} matrix with {size}x{size} mask "
        f"({edge_solution}, {resolved} edge windows resolved)"
    )
    return out


def finalize_pixels(values: np.ndarray, overflow: Overflow = "clip") -> np.ndarray:
    """
    Map raw filter results into 8‑bit storage.

    ``"clip"`` clamps to [0, 255]; ``"wrap"`` keeps the low 8 bits
    (e.g. 256 → 0, −1 → 255).
    """
    values = np.asarray(values, dtype=np.int64)
    if overflow == "clip":
        return np.clip(values, 0, 255).astype(np.uint8)
    if overflow == "wrap":
        return np.mod(values, 256).astype(np.uint8)
    raise ValueError("`overflow` must be 'clip' or 'wrap'")


# --------------------------------------------------------------------------- #
# Whole‑image entry points
# --------------------------------------------------------------------------- #
@timer
def operate(
    image: Optional[bytes],
    mask: Optional[Sequence[int]],
    size: Optional[int],
    edge_solution: Optional[EdgeSolution],
    cfg: FilterConfig | None = None,
) -> Optional[bytes]:
    """
    Apply the smoothing operation to an encoded image.

    Returns
    -------
    bytes or None
        Encoded filtered image in the source format, or None when any of the
        four inputs is missing (nothing is done in that case).
    """
    if image is None or mask is None or size is None or edge_solution is None:
        logger.debug("operate skipped: missing image, mask, size or edge solution")
        return None

    cfg = cfg or FilterConfig()
    weights = validate_mask(mask, size)

    decoded = codec.decode(image)
    luminance = codec.extract_luminance(decoded)
    matrix = build_matrix(luminance, decoded.width, strict=cfg.strict_dimensions)

    raw = filter_matrix(matrix, weights, size, edge_solution)
    out_u8 = finalize_pixels(raw, cfg.overflow)

    height, width = matrix.shape
    return codec.encode(width, height, out_u8.ravel(), decoded.fmt)


def operate_named(
    image: Optional[bytes],
    filter_name: str,
    edge_solution: Optional[EdgeSolution] = None,
    cfg: FilterConfig | None = None,
) -> Optional[bytes]:
    """`operate` with a kernel taken from the catalog by *filter_name*."""
    spec = get_kernel(filter_name)
    return operate(
        image,
        spec.mask,
        spec.size,
        edge_solution or spec.edge_solution,
        cfg=cfg,
    )
