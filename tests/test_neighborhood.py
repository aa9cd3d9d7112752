"""
test_neighborhood.py
====================

Matrix building and window extraction: in‑bounds reads, toroidal wrap and
masked (unresolved) slots at every edge and corner.
"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from matrix import DimensionMismatchError, build_matrix
from neighborhood import get_neighborhood, has_sentinel, window_offsets


def create_ramp_matrix(height: int = 4, width: int = 5) -> np.ndarray:
    """Matrix whose value encodes its own position: 10*row + col."""
    rows = np.arange(height)[:, None] * 10
    cols = np.arange(width)[None, :]
    return (rows + cols).astype(np.uint8)


class TestBuildMatrix:
    """Flat buffer → H×W matrix."""

    def test_row_major_reshape(self):
        m = build_matrix(bytes(range(12)), 4)
        assert m.shape == (3, 4)
        assert m.dtype == np.uint8
        assert m[0].tolist() == [0, 1, 2, 3]
        assert m[2].tolist() == [8, 9, 10, 11]

    def test_accepts_sequences_and_arrays(self):
        from_list = build_matrix([5, 6, 7, 8], 2)
        from_array = build_matrix(np.array([[5, 6], [7, 8]]), 2)
        assert np.array_equal(from_list, from_array)

    def test_matrix_is_read_only(self):
        m = build_matrix(bytes(range(4)), 2)
        with pytest.raises(ValueError):
            m[0, 0] = 1

    def test_trailing_values_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="matrix"):
            m = build_matrix(bytes(range(10)), 3)
        assert m.shape == (3, 3)
        assert m[-1].tolist() == [6, 7, 8]
        assert "dropping 1 trailing value" in caplog.text

    def test_strict_mode_raises(self):
        with pytest.raises(DimensionMismatchError):
            build_matrix(bytes(range(10)), 3, strict=True)

    def test_invalid_width(self):
        with pytest.raises(ValueError):
            build_matrix(bytes(range(4)), 0)

    def test_out_of_range_values_rejected(self):
        with pytest.raises(ValueError):
            build_matrix([0, 256], 2)

    def test_fractional_values_rejected(self):
        with pytest.raises(ValueError, match="integers"):
            build_matrix([1.7, 2.0], 2)

    def test_integral_floats_accepted(self):
        assert build_matrix(np.array([1.0, 2.0]), 2).tolist() == [[1, 2]]


class TestWindowOffsets:

    def test_offsets(self):
        assert window_offsets(1).tolist() == [0]
        assert window_offsets(5).tolist() == [-2, -1, 0, 1, 2]

    @pytest.mark.parametrize("size", [0, 2, 4, -3])
    def test_invalid_sizes(self, size):
        with pytest.raises(ValueError):
            window_offsets(size)


class TestInteriorExtraction:

    def test_interior_window_is_row_major(self):
        m = create_ramp_matrix()
        nb = get_neighborhood(m, 1, 2, 3)
        assert not has_sentinel(nb)
        assert nb.tolist() == [1, 2, 3, 11, 12, 13, 21, 22, 23]

    def test_length_is_size_squared(self):
        m = create_ramp_matrix(7, 7)
        for size in (1, 3, 5, 7, 9):
            assert get_neighborhood(m, 3, 3, size).size == size * size

    def test_wrap_flag_irrelevant_inside(self):
        m = create_ramp_matrix()
        plain = get_neighborhood(m, 2, 2, 3)
        wrapped = get_neighborhood(m, 2, 2, 3, wrap=True)
        assert np.array_equal(np.ma.getdata(plain), np.ma.getdata(wrapped))


class TestSentinelMarking:
    """wrap=False: exactly the out‑of‑bounds offsets are masked."""

    def test_top_left_corner(self):
        m = create_ramp_matrix()
        nb = get_neighborhood(m, 0, 0, 3)
        expected_mask = [True, True, True, True, False, False, True, False, False]
        assert np.ma.getmaskarray(nb).tolist() == expected_mask
        assert nb.compressed().tolist() == [0, 1, 10, 11]
        assert has_sentinel(nb)

    def test_bottom_right_corner(self):
        m = create_ramp_matrix()
        nb = get_neighborhood(m, 3, 4, 3)
        expected_mask = [False, False, True, False, False, True, True, True, True]
        assert np.ma.getmaskarray(nb).tolist() == expected_mask
        assert nb.compressed().tolist() == [23, 24, 33, 34]

    @pytest.mark.parametrize("y, x", [(0, 2), (3, 1), (2, 0), (1, 4), (0, 4), (3, 0)])
    def test_every_border_position(self, y, x):
        m = create_ramp_matrix()
        h, w = m.shape
        size = 5
        nb = get_neighborhood(m, y, x, size)
        masked = np.ma.getmaskarray(nb)
        data = np.ma.getdata(nb)

        i = 0
        for dy in window_offsets(size):
            for dx in window_offsets(size):
                yy, xx = y + dy, x + dx
                inside = 0 <= yy < h and 0 <= xx < w
                assert masked[i] == (not inside)
                if inside:
                    assert data[i] == m[yy, xx]
                i += 1

    def test_far_outside_position_never_raises(self):
        m = create_ramp_matrix()
        nb = get_neighborhood(m, -10, 50, 3)
        assert nb.size == 9
        assert np.ma.getmaskarray(nb).all()


class TestToroidalWrap:
    """wrap=True: slot (dy, dx) equals matrix[(y+dy) mod H][(x+dx) mod W]."""

    @pytest.mark.parametrize("y, x", [(0, 0), (0, 4), (3, 0), (3, 4), (1, 2)])
    @pytest.mark.parametrize("size", [3, 5, 7])
    def test_modular_addressing(self, y, x, size):
        m = create_ramp_matrix()
        h, w = m.shape
        nb = get_neighborhood(m, y, x, size, wrap=True)
        assert not has_sentinel(nb)

        expected = [
            int(m[(y + dy) % h, (x + dx) % w])
            for dy in window_offsets(size)
            for dx in window_offsets(size)
        ]
        assert nb.tolist() == expected

    def test_corner_reads_diagonal_neighbour(self):
        m = np.array([[0, 0], [0, 255]], dtype=np.uint8)
        nb = get_neighborhood(m, 0, 0, 3, wrap=True)
        # offset (-1, -1) is the first slot
        assert nb[0] == 255

    def test_rejects_non_2d(self):
        with pytest.raises(ValueError):
            get_neighborhood(np.zeros(9, dtype=np.uint8), 0, 0, 3)
