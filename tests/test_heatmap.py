"""Tests for the heatmap engine and the Heatmap model."""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from prometheus_client import REGISTRY

from spyfield.errors import InvalidStateError
from spyfield.heatmap import (
    compute_heatmap,
    compute_heatmap_grid,
    compute_heatmap_reference,
)
from spyfield.models import Coordinate, EvilMember, Heatmap, Spy
from spyfield.rng import generate_evil_members


def member(i: int, x: float, y: float, value: int = 1) -> EvilMember:
    return EvilMember(id=i, coord=Coordinate(x=x, y=y), value=value)


class TestComputeHeatmap:
    def test_shape_and_bounds(self) -> None:
        members = generate_evil_members(100.0, 20, 42)
        heatmap = compute_heatmap(10.0, 100, members)
        assert heatmap.size == 100
        assert len(heatmap.values) == 100 * 100
        assert heatmap.min_value == min(heatmap.values)
        assert heatmap.max_value == max(heatmap.values)

    def test_no_members_is_all_zero(self) -> None:
        heatmap = compute_heatmap(10.0, 8, [])
        assert set(heatmap.values) == {0}
        assert heatmap.min_value == heatmap.max_value == 0

    def test_cells_sample_their_centres(self) -> None:
        # Centres (4.5, 4.5), (5.5, 4.5), (4.5, 5.5), (5.5, 5.5) are all
        # ~0.707 away; every other centre is at least ~1.58 away.
        heatmap = compute_heatmap(1.0, 10, [member(0, 5.0, 5.0, 9)])
        hot = {
            (cx, cy)
            for cy in range(10)
            for cx in range(10)
            if heatmap.cell(cx, cy) > 0
        }
        assert hot == {(4, 4), (5, 4), (4, 5), (5, 5)}
        assert heatmap.max_value == 9
        assert heatmap.min_value == 0

    def test_boundary_cells_excluded(self) -> None:
        # Neighbouring centres are exactly 1.0 away from the member.
        heatmap = compute_heatmap(1.0, 5, [member(0, 2.5, 0.5, 3)])
        assert heatmap.cell(2, 0) == 3
        assert heatmap.cell(1, 0) == 0
        assert heatmap.cell(3, 0) == 0
        assert heatmap.cell(2, 1) == 0

    def test_row_major_layout(self) -> None:
        heatmap = compute_heatmap(0.6, 4, [member(0, 3.5, 1.5, 2)])
        assert heatmap.values[1 * 4 + 3] == 2
        assert sum(heatmap.values) == 2

    def test_values_accumulate(self) -> None:
        members = [member(0, 2.5, 2.5, 9), member(1, 2.6, 2.5, 8)]
        heatmap = compute_heatmap(1.0, 5, members)
        assert heatmap.cell(2, 2) == 17

    def test_spies_contribute_one(self) -> None:
        points = [member(0, 2.5, 2.5, 9), Spy(id=0, coord=Coordinate(x=2.5, y=2.5))]
        assert compute_heatmap(1.0, 5, points).cell(2, 2) == 10

    def test_cell_size_scales_sample_points(self) -> None:
        heatmap = compute_heatmap(6.0, 10, [member(0, 55.0, 55.0, 4)], cell_size=10.0)
        assert heatmap.cell(5, 5) == 4
        assert sum(heatmap.values) == 4

    def test_matches_reference_on_seeded_members(self) -> None:
        members = generate_evil_members(25.0, 15, 3)
        fast = compute_heatmap(7.3, 25, members)
        slow = compute_heatmap_reference(7.3, 25, members)
        assert fast == slow

    def test_grid_is_int_array(self) -> None:
        grid = compute_heatmap_grid(3.0, 6, [member(0, 3.0, 3.0, 5)])
        assert grid.shape == (6, 6)
        assert grid.dtype == np.int64

    def test_records_compute_time(self) -> None:
        before = REGISTRY.get_sample_value(
            "spyfield_heatmap_compute_seconds_count"
        ) or 0.0
        compute_heatmap(2.0, 4, [])
        after = REGISTRY.get_sample_value("spyfield_heatmap_compute_seconds_count")
        assert after == before + 1


points_strategy = st.lists(
    st.tuples(
        st.floats(min_value=0.0, max_value=12.0, allow_nan=False, exclude_max=True),
        st.floats(min_value=0.0, max_value=12.0, allow_nan=False, exclude_max=True),
        st.integers(min_value=1, max_value=9),
    ),
    max_size=6,
)


class TestHeatmapProperties:
    @settings(max_examples=60, deadline=None)
    @given(
        raw=points_strategy,
        resolution=st.integers(min_value=1, max_value=12),
        radius=st.floats(min_value=0.01, max_value=15.0, allow_nan=False),
    )
    def test_vectorised_matches_reference(self, raw, resolution, radius) -> None:
        members = [member(i, x, y, v) for i, (x, y, v) in enumerate(raw)]
        fast = compute_heatmap(radius, resolution, members)
        assert fast == compute_heatmap_reference(radius, resolution, members)

    @settings(max_examples=60, deadline=None)
    @given(
        raw=points_strategy,
        resolution=st.integers(min_value=1, max_value=12),
        radius=st.floats(min_value=0.01, max_value=15.0, allow_nan=False),
    )
    def test_shape_invariant(self, raw, resolution, radius) -> None:
        members = [member(i, x, y, v) for i, (x, y, v) in enumerate(raw)]
        heatmap = compute_heatmap(radius, resolution, members)
        assert len(heatmap.values) == resolution * resolution
        assert all(
            heatmap.min_value <= v <= heatmap.max_value for v in heatmap.values
        )
        assert heatmap.max_value <= sum(v for _, _, v in raw)


class TestHeatmapModel:
    def test_from_grid_computes_bounds(self) -> None:
        heatmap = Heatmap.from_grid(2, [3, 1, 4, 1])
        assert heatmap.min_value == 1
        assert heatmap.max_value == 4

    def test_stale_bounds_rejected(self) -> None:
        with pytest.raises(InvalidStateError):
            Heatmap(size=2, values=(1, 2, 3, 4), min_value=0, max_value=4)

    def test_wrong_cell_count_rejected(self) -> None:
        with pytest.raises(InvalidStateError):
            Heatmap(size=2, values=(1, 2, 3), min_value=1, max_value=3)

    def test_to_array_matches_cells(self) -> None:
        heatmap = Heatmap.from_grid(3, range(9))
        array = heatmap.to_array()
        assert array.shape == (3, 3)
        for cy in range(3):
            for cx in range(3):
                assert array[cy, cx] == heatmap.cell(cx, cy)

    def test_normalized(self) -> None:
        heatmap = Heatmap.from_grid(2, [0, 5, 10, 10])
        assert heatmap.normalized(0, 0) == 0.0
        assert heatmap.normalized(1, 0) == 0.5
        assert heatmap.normalized(1, 1) == 1.0

    def test_normalized_flat_grid(self) -> None:
        assert Heatmap.from_grid(2, [7, 7, 7, 7]).normalized(1, 1) == 0.0
