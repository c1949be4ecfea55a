from __future__ import annotations

import math

import pytest

from asphalt_emissions.errors import EmptyDatasetError
from asphalt_emissions.states import ALASKA_FIPS, HAWAII_FIPS
from asphalt_emissions.steps.clean_emissions import EmissionsRow
from asphalt_emissions.steps.join_geometry import join_emissions
from asphalt_emissions.steps.summarize import compute_color_scale


def _rows(state_geometry, skip=()):
    return [
        EmissionsRow(statefp=fp, state_name=name, emissions=float(i))
        for i, (fp, name) in enumerate(zip(state_geometry["statefp"], state_geometry["state_name"]))
        if fp not in skip
    ]


def test_partial_coverage_keeps_every_geometry(state_geometry) -> None:
    rows = _rows(state_geometry, skip={ALASKA_FIPS, HAWAII_FIPS, "11"})

    joined, coverage = join_emissions(state_geometry, rows)

    assert len(joined) == 51
    assert (coverage.matched, coverage.total) == (48, 51)
    assert coverage.unmatched == 3
    assert not coverage.complete
    missing = set(joined.loc[joined["emissions"].isna(), "statefp"])
    assert missing == {ALASKA_FIPS, HAWAII_FIPS, "11"}
    assert joined.geometry.notna().all()


def test_full_coverage(state_geometry) -> None:
    _, coverage = join_emissions(state_geometry, _rows(state_geometry))

    assert coverage.complete
    assert coverage.matched == coverage.total == coverage.cleaned == 51


def test_coverage_bounded_by_geometries_and_rows(state_geometry) -> None:
    rows = _rows(state_geometry)
    fewer_shapes = state_geometry.iloc[:10].copy()

    _, coverage = join_emissions(fewer_shapes, rows)

    assert coverage.matched <= coverage.total == 10
    assert coverage.matched <= coverage.cleaned


def test_join_with_no_rows(state_geometry) -> None:
    joined, coverage = join_emissions(state_geometry, [])

    assert coverage.matched == 0
    assert joined["emissions"].isna().all()


def test_color_scale_example() -> None:
    scale = compute_color_scale([12.5, 9.0])

    assert scale.vmin == 9.0
    assert scale.vmax == 12.5
    assert scale.median == pytest.approx(10.75)
    assert not scale.is_degenerate


def test_color_scale_uses_median_not_mean() -> None:
    scale = compute_color_scale([1.0, 2.0, 3.0, 100.0, 2.5])

    assert scale.median == 2.5


def test_color_scale_degenerate() -> None:
    scale = compute_color_scale([4.2, 4.2, 4.2])

    assert scale.vmin == scale.median == scale.vmax == 4.2
    assert scale.is_degenerate


def test_color_scale_ignores_nan() -> None:
    scale = compute_color_scale([1.0, math.nan, 3.0])

    assert (scale.vmin, scale.median, scale.vmax) == (1.0, 2.0, 3.0)


def test_color_scale_empty_is_fatal() -> None:
    with pytest.raises(EmptyDatasetError):
        compute_color_scale([])
