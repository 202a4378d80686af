# tests/test_prophylaxis.py
from app.alert_engine.prophylaxis import (
    STANDARD_REGIMEN,
    empiric_plan,
    join_colonization,
    parse_colonization,
)


def test_parse_colonization_splits_and_normalises():
    assert parse_colonization("kpc + ndm") == ("KPC", "NDM")
    assert parse_colonization("VRE, ESBL, VRE") == ("VRE", "ESBL")
    assert parse_colonization(None) == ()
    assert parse_colonization("") == ()


def test_join_colonization():
    assert join_colonization(("KPC", "NDM")) == "KPC+NDM"
    assert join_colonization(()) is None


def test_no_colonization_gets_standard_regimen():
    assert empiric_plan(()) == [STANDARD_REGIMEN]


def test_kpc_replaces_standard_regimen():
    plan = empiric_plan(("KPC",))
    assert plan == ["KPC: Meropenem + Polimixina + HMC"]


def test_kpc_ndm_lists_both():
    plan = empiric_plan(parse_colonization("KPC+NDM"))
    assert len(plan) == 2
    assert plan[0].startswith("KPC")
    assert plan[1].startswith("NDM")


def test_vre_is_added_on_top_of_standard_regimen():
    plan = empiric_plan(("VRE",))
    assert plan[0] == STANDARD_REGIMEN
    assert "Linezolida" in plan[1]


def test_unknown_codes_contribute_nothing():
    assert empiric_plan(("NEGATIVO", "XYZ")) == [STANDARD_REGIMEN]
