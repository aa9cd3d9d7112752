"""
edge_solutions.py
=================

Edge‑resolution strategies: turn a partially‑resolved neighborhood (masked
slots where the window left the image) into a complete window.

Public API
----------
EdgeContext                              # fixed‑field input of every strategy
EdgeSolution.resolve(ctx) -> NDArray[np.int64]
EdgeSolution.from_name(name) -> EdgeSolution

replication_solution(ctx)   – every slot = centre pixel
zero_solution(ctx)          – every slot = 0
padding_solution(ctx)       – masked slots = 0, valid slots kept
convolution_solution(ctx)   – re‑read the window with toroidal wrap

Each EdgeSolution member carries two independent facts:

* ``resolves_sentinels`` – the orchestrator must call `resolve` when the
  extracted window contains masked slots.
* ``wraps_extraction``   – the orchestrator must extract with ``wrap=True``.

Only PERIODIC_CONVOLUTION wraps, and it is also the only one that never
needs to resolve anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict

import numpy as np

from neighborhood import Coord, get_neighborhood

__all__ = [
    "EdgeContext",
    "EdgeSolution",
    "replication_solution",
    "zero_solution",
    "padding_solution",
    "convolution_solution",
]


@dataclass(frozen=True, slots=True)
class EdgeContext:
    """Everything a strategy may look at; strategies ignore what they don't need."""
    center_value: int
    desired_length: int
    neighborhood: np.ma.MaskedArray
    matrix: np.ndarray  # borrowed, never written
    position: Coord  # (row, col)


# --------------------------------------------------------------------------- #
# Strategy functions
# --------------------------------------------------------------------------- #
def replication_solution(ctx: EdgeContext) -> np.ndarray:
    """New neighborhood with every pixel being the centre pixel."""
    return np.full(ctx.desired_length, ctx.center_value, dtype=np.int64)


def zero_solution(ctx: EdgeContext) -> np.ndarray:
    return np.zeros(ctx.desired_length, dtype=np.int64)


def padding_solution(ctx: EdgeContext) -> np.ndarray:
    """New neighborhood with 0 on inexistent pixels."""
    return np.ma.filled(ctx.neighborhood.astype(np.int64), 0)


def convolution_solution(ctx: EdgeContext) -> np.ndarray:
    """Re‑extract the window at ``ctx.position`` treating the image as a torus."""
    size = int(round(np.sqrt(ctx.desired_length)))
    if size * size != ctx.desired_length:
        raise ValueError("desired_length must be a perfect square.")

    y, x = ctx.position
    wrapped = get_neighborhood(ctx.matrix, y, x, size, wrap=True)
    return np.ma.filled(wrapped, 0)


# --------------------------------------------------------------------------- #
# Tagged variant
# --------------------------------------------------------------------------- #
class EdgeSolution(Enum):
    REPLICATION = ("replication", True, False)
    ZERO = ("zero", True, False)
    ZERO_PADDING = ("zero_padding", True, False)
    PERIODIC_CONVOLUTION = ("periodic", False, True)

    def __init__(self, label: str, resolves_sentinels: bool, wraps_extraction: bool):
        self.label = label
        self.resolves_sentinels = resolves_sentinels
        self.wraps_extraction = wraps_extraction

    def resolve(self, ctx: EdgeContext) -> np.ndarray:
        out = _SOLVERS[self](ctx)
        if out.size != ctx.desired_length:
            raise ValueError(
                f"{self.label} produced {out.size} values, expected {ctx.desired_length}."
            )
        return out

    @classmethod
    def from_name(cls, name: str) -> "EdgeSolution":
        key = name.strip().lower().replace("-", "_")
        for member in cls:
            if key in (member.label, member.name.lower()):
                return member
        known = ", ".join(m.label for m in cls)
        raise ValueError(f"Unknown edge solution '{name}' (expected one of: {known}).")

    def __str__(self) -> str:
        return self.label


_SOLVERS: Dict[EdgeSolution, Callable[[EdgeContext], np.ndarray]] = {
    EdgeSolution.REPLICATION: replication_solution,
    EdgeSolution.ZERO: zero_solution,
    EdgeSolution.ZERO_PADDING: padding_solution,
    EdgeSolution.PERIODIC_CONVOLUTION: convolution_solution,
}
