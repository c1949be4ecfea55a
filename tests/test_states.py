from __future__ import annotations

import math

from asphalt_emissions.states import STATE_FIPS, canonical_state_name, lookup_statefp, normalize_state_name


def test_fips_table_covers_fifty_states_and_dc() -> None:
    assert len(STATE_FIPS) == 51
    assert len(set(STATE_FIPS.values())) == 51
    assert STATE_FIPS["District of Columbia"] == "11"
    assert all(len(code) == 2 for code in STATE_FIPS.values())


def test_normalize_trims_collapses_and_casefolds() -> None:
    assert normalize_state_name("  New   York ") == "new york"
    assert normalize_state_name("TEXAS") == "texas"


def test_normalize_treats_blank_and_missing_as_none() -> None:
    assert normalize_state_name(None) is None
    assert normalize_state_name(math.nan) is None
    assert normalize_state_name("   ") is None


def test_lookup_statefp_matches_case_insensitively() -> None:
    assert lookup_statefp("california") == "06"
    assert lookup_statefp(" West Virginia") == "54"


def test_lookup_statefp_accepts_dc_spellings() -> None:
    assert lookup_statefp("Washington, D.C.") == "11"
    assert canonical_state_name("DC") == "District of Columbia"


def test_lookup_statefp_rejects_non_states() -> None:
    assert lookup_statefp("Puerto Rico") is None
    assert lookup_statefp("Total") is None
    assert lookup_statefp(42) is None
