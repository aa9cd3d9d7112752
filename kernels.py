"""
kernels.py
==========

Named kernel catalog: maps a filter name to the (mask, size, default edge
solution) triple consumed by the orchestrator.

Public API
----------
get_kernel(name: str) -> KernelSpec
list_kernels() -> list[KernelSpec]

All masks are flat, row‑major and have a non‑zero weight sum, so they can be
normalized by `masking.apply_mask`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

from edge_solutions import EdgeSolution
from masking import validate_mask

__all__ = ["KernelSpec", "get_kernel", "list_kernels"]


@dataclass(frozen=True, slots=True)
class KernelSpec:
    name: str
    mask: Tuple[int, ...]
    size: int
    edge_solution: EdgeSolution
    description: str = ""


_CATALOG: Dict[str, KernelSpec] = {
    spec.name: spec
    for spec in (
        KernelSpec(
            name="mean3",
            mask=(1,) * 9,
            size=3,
            edge_solution=EdgeSolution.REPLICATION,
            description="3x3 box average",
        ),
        KernelSpec(
            name="mean5",
            mask=(1,) * 25,
            size=5,
            edge_solution=EdgeSolution.REPLICATION,
            description="5x5 box average",
        ),
        KernelSpec(
            name="weighted_mean",
            mask=(
                1, 2, 1,
                2, 4, 2,
                1, 2, 1,
            ),
            size=3,
            edge_solution=EdgeSolution.ZERO_PADDING,
            description="3x3 weighted average (binomial)",
        ),
        KernelSpec(
            name="gaussian5",
            mask=(
                1, 4, 6, 4, 1,
                4, 16, 24, 16, 4,
                6, 24, 36, 24, 6,
                4, 16, 24, 16, 4,
                1, 4, 6, 4, 1,
            ),
            size=5,
            edge_solution=EdgeSolution.ZERO_PADDING,
            description="5x5 Gaussian approximation (sum 256)",
        ),
        KernelSpec(
            name="sharpen",
            mask=(
                0, -1, 0,
                -1, 5, -1,
                0, -1, 0,
            ),
            size=3,
            edge_solution=EdgeSolution.REPLICATION,
            description="Laplacian sharpening (identity minus 4-neighbour Laplacian)",
        ),
        KernelSpec(
            name="highboost",
            mask=(
                -1, -1, -1,
                -1, 9, -1,
                -1, -1, -1,
            ),
            size=3,
            edge_solution=EdgeSolution.REPLICATION,
            description="Highboost (identity minus 8-neighbour Laplacian)",
        ),
    )
}

# every catalog mask must be applicable
for _spec in _CATALOG.values():
    validate_mask(_spec.mask, _spec.size)


# filter identifiers of the UI catalog → entry with a normalizable mask
_ALIASES: Dict[str, str] = {
    "unsharp_masking": "sharpen",
    "highboost_filtering": "highboost",
    "gaussian": "gaussian5",
    "mean": "mean3",
}


def _normalize_name(name: str) -> str:
    """'highboostFiltering' / 'Highboost-Filtering' → 'highboost_filtering'."""
    key = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name.strip())
    return key.lower().replace("-", "_").replace(" ", "_")


def get_kernel(name: str) -> KernelSpec:
    """Look up a catalog entry by *name* or alias (case‑insensitive)."""
    key = _normalize_name(name)
    key = _ALIASES.get(key, key)
    try:
        return _CATALOG[key]
    except KeyError:
        known = ", ".join(sorted(_CATALOG))
        raise KeyError(f"Unknown filter '{name}' (known: {known}).") from None


def list_kernels() -> List[KernelSpec]:
    return [_CATALOG[k] for k in sorted(_CATALOG)]
