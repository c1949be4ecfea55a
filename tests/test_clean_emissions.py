from __future__ import annotations

import math

import pandas as pd
import pytest

from asphalt_emissions.errors import InventoryReadError
from asphalt_emissions.states import STATE_FIPS
from asphalt_emissions.steps.clean_emissions import EmissionsRow, clean_emissions, parse_emissions, rows_to_frame


def _frame(rows, columns=("State", "Total kg/person")) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=list(columns), dtype=object)


def test_bad_values_are_dropped_not_raised() -> None:
    df = _frame([("California", 12.5), ("Texas", 9.0), ("Ohio", "n/a")])

    rows = clean_emissions(df)

    assert rows == [
        EmissionsRow(statefp="06", state_name="California", emissions=12.5),
        EmissionsRow(statefp="48", state_name="Texas", emissions=9.0),
    ]


def test_only_the_two_columns_are_kept_and_others_ignored() -> None:
    df = pd.DataFrame(
        {
            "Region": ["West", "South"],
            "State": ["California", "Texas"],
            "Total kg/person": [1.0, 2.0],
            "Notes": ["a", "b"],
        }
    )

    frame = rows_to_frame(clean_emissions(df))

    assert list(frame.columns) == ["statefp", "emissions"]
    assert frame["statefp"].tolist() == ["06", "48"]


def test_state_names_are_normalized() -> None:
    df = _frame([("  california ", 1.0), ("NEW  YORK", "2.5")])

    rows = clean_emissions(df)

    assert [r.statefp for r in rows] == ["06", "36"]
    assert [r.state_name for r in rows] == ["California", "New York"]


def test_unknown_and_missing_states_are_dropped() -> None:
    df = _frame([("Puerto Rico", 1.0), (None, 2.0), ("Total", 3.0), ("Utah", 4.0)])

    rows = clean_emissions(df)

    assert [r.state_name for r in rows] == ["Utah"]


def test_duplicate_states_keep_first_row() -> None:
    df = _frame([("Texas", 9.0), ("texas", 99.0)])

    rows = clean_emissions(df)

    assert len(rows) == 1
    assert rows[0].emissions == 9.0


def test_cleaned_rows_are_finite_and_canonical(all_state_rows) -> None:
    noisy = all_state_rows + [("Nowhere", 1.0), ("Ohio", float("inf")), ("Iowa", "")]
    rows = clean_emissions(_frame(noisy))

    assert len(rows) == 51
    assert all(math.isfinite(r.emissions) for r in rows)
    assert {r.statefp for r in rows} <= set(STATE_FIPS.values())


def test_missing_column_is_fatal() -> None:
    df = _frame([("Texas", 1.0)], columns=("State", "Total kg"))

    with pytest.raises(InventoryReadError):
        clean_emissions(df)


def test_custom_column_names() -> None:
    df = _frame([("Maine", 3.0)], columns=("Name", "Per capita"))

    rows = clean_emissions(df, state_column="Name", value_column="Per capita")

    assert rows[0].statefp == "23"


@pytest.mark.parametrize(
    "raw, expected",
    [
        (12.5, 12.5),
        ("9", 9.0),
        (" 1,250.5 ", 1250.5),
        ("n/a", None),
        ("", None),
        (None, None),
        (float("nan"), None),
        ("inf", None),
        (True, None),
    ],
)
def test_parse_emissions(raw, expected) -> None:
    assert parse_emissions(raw) == expected
