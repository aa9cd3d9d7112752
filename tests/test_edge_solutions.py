"""
test_edge_solutions.py
======================

Edge‑resolution strategies and the EdgeSolution tagged variant.
"""

from __future__ import annotations

import dataclasses

import numpy as np
import pytest

from edge_solutions import (
    EdgeContext,
    EdgeSolution,
    convolution_solution,
    padding_solution,
    replication_solution,
    zero_solution,
)
from neighborhood import get_neighborhood


def make_context(**overrides) -> EdgeContext:
    """EdgeContext with harmless defaults; override only what a test needs."""
    fields = {
        "center_value": 0,
        "desired_length": 9,
        "neighborhood": np.ma.MaskedArray(np.zeros(9, dtype=np.int64), mask=np.zeros(9, dtype=bool)),
        "matrix": np.zeros((3, 3), dtype=np.uint8),
        "position": (1, 1),
    }
    fields.update(overrides)
    return EdgeContext(**fields)


class TestStrategyFunctions:

    def test_replication(self):
        out = replication_solution(make_context(center_value=7, desired_length=9))
        assert out.tolist() == [7] * 9

    def test_zero(self):
        out = zero_solution(make_context(desired_length=4))
        assert out.tolist() == [0, 0, 0, 0]

    def test_padding_replaces_only_unresolved_slots(self):
        nb = np.ma.MaskedArray([0, 3, 0, 5], mask=[True, False, True, False])
        out = padding_solution(make_context(neighborhood=nb, desired_length=4))
        assert out.tolist() == [0, 3, 0, 5]
        assert not np.ma.isMaskedArray(out)

    def test_padding_keeps_valid_zero_and_nonzero_values(self):
        nb = np.ma.MaskedArray([9, 0, 4, 200], mask=[False, False, True, False])
        out = padding_solution(make_context(neighborhood=nb, desired_length=4))
        assert out.tolist() == [9, 0, 0, 200]

    def test_convolution_rereads_with_wrap(self):
        m = np.arange(16, dtype=np.uint8).reshape(4, 4)
        partial = get_neighborhood(m, 0, 3, 3)
        ctx = make_context(matrix=m, position=(0, 3), neighborhood=partial, desired_length=9)
        out = convolution_solution(ctx)
        expected = np.ma.getdata(get_neighborhood(m, 0, 3, 3, wrap=True))
        assert out.tolist() == expected.tolist()
        assert out.tolist() == [14, 15, 12, 2, 3, 0, 6, 7, 4]

    def test_convolution_needs_square_length(self):
        with pytest.raises(ValueError):
            convolution_solution(make_context(desired_length=8))


class TestEdgeSolutionVariant:

    def test_flags_are_independent_facts(self):
        for member in (EdgeSolution.REPLICATION, EdgeSolution.ZERO, EdgeSolution.ZERO_PADDING):
            assert member.resolves_sentinels is True
            assert member.wraps_extraction is False

        periodic = EdgeSolution.PERIODIC_CONVOLUTION
        assert periodic.resolves_sentinels is False
        assert periodic.wraps_extraction is True

    def test_resolve_dispatches(self):
        nb = np.ma.MaskedArray([1, 2, 3, 4], mask=[True, False, False, True])
        ctx = make_context(center_value=5, desired_length=4, neighborhood=nb)
        assert EdgeSolution.REPLICATION.resolve(ctx).tolist() == [5, 5, 5, 5]
        assert EdgeSolution.ZERO.resolve(ctx).tolist() == [0, 0, 0, 0]
        assert EdgeSolution.ZERO_PADDING.resolve(ctx).tolist() == [0, 2, 3, 0]

    def test_resolve_checks_output_length(self):
        nb = np.ma.MaskedArray([1, 2], mask=[True, False])
        ctx = make_context(desired_length=4, neighborhood=nb)
        with pytest.raises(ValueError):
            EdgeSolution.ZERO_PADDING.resolve(ctx)

    @pytest.mark.parametrize(
        "name, member",
        [
            ("replication", EdgeSolution.REPLICATION),
            ("zero", EdgeSolution.ZERO),
            ("zero_padding", EdgeSolution.ZERO_PADDING),
            ("zero-padding", EdgeSolution.ZERO_PADDING),
            ("periodic", EdgeSolution.PERIODIC_CONVOLUTION),
            ("PERIODIC_CONVOLUTION", EdgeSolution.PERIODIC_CONVOLUTION),
        ],
    )
    def test_from_name(self, name, member):
        assert EdgeSolution.from_name(name) is member

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match="Unknown edge solution"):
            EdgeSolution.from_name("mirror")

    def test_str_is_label(self):
        assert str(EdgeSolution.ZERO_PADDING) == "zero_padding"

    def test_context_is_frozen(self):
        ctx = make_context()
        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.center_value = 3  # type: ignore[misc]
