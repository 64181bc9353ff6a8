from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from app.db.model.sku import ComponentDetail
from app.repository import component_repo
from app.services import association_service
from app.utils import sku_codes


def _value(db, component_id):
    db.expire_all()
    return db.get(ComponentDetail, component_id).sku_code


# ---------- remove_from_all ----------
def test_remove_from_all_handles_every_position(db, make_component):
    first = make_component("C-FIRST", "S1,S2,S3")
    middle = make_component("C-MIDDLE", "S2,S1,S3")
    only = make_component("C-ONLY", "S1")
    decoy = make_component("C-DECOY", "S10")

    changes = association_service.remove_from_all(db, "S1")

    assert {c.component_id for c in changes} == {first.id, middle.id, only.id}
    assert all(c.ok for c in changes)
    assert _value(db, first.id) == "S2,S3"
    assert _value(db, middle.id) == "S2,S3"
    assert _value(db, only.id) is None
    assert _value(db, decoy.id) == "S10"

    by_id = {c.component_id: c for c in changes}
    assert by_id[first.id].old_sku_code == "S1,S2,S3"
    assert by_id[first.id].new_sku_code == "S2,S3"
    assert by_id[only.id].new_sku_code is None


def test_remove_from_all_no_match_is_noop(db, make_component):
    comp = make_component("C1", "S2,S3")
    assert association_service.remove_from_all(db, "S1") == []
    assert _value(db, comp.id) == "S2,S3"


def test_remove_from_all_ignores_inactive_components(db, make_component):
    inactive = make_component("C-OFF", "S1,S2", is_active=False)
    assert association_service.remove_from_all(db, "S1") == []
    assert _value(db, inactive.id) == "S1,S2"


def test_remove_from_all_matches_tokens_with_spaces(db, make_component):
    spaced = make_component("C-SPACED", "S2, S1")
    padded = make_component("C-PADDED", " S1 ,S3")
    decoy = make_component("C-DECOY", "S2, S10")

    changes = association_service.remove_from_all(db, "S1")

    assert {c.component_id for c in changes} == {spaced.id, padded.id}
    assert _value(db, spaced.id) == "S2"
    assert _value(db, padded.id) == "S3"
    assert _value(db, decoy.id) == "S2, S10"


def test_remove_from_all_records_row_failure_and_continues(db, make_component, monkeypatch):
    bad = make_component("C-BAD", "S1,S2")
    good = make_component("C-GOOD", "S3,S1")

    real_set = component_repo.set_sku_codes

    def flaky_set(session, component, value):
        if component.id == bad.id:
            raise OperationalError("UPDATE component_details", {}, Exception("constraint violated"))
        return real_set(session, component, value)

    monkeypatch.setattr(component_repo, "set_sku_codes", flaky_set)

    changes = association_service.remove_from_all(db, "S1")

    assert len(changes) == 2
    failed = next(c for c in changes if c.component_id == bad.id)
    assert not failed.ok
    assert failed.component_code == "C-BAD"
    assert "constraint violated" in failed.error
    assert _value(db, good.id) == "S3"
    assert _value(db, bad.id) == "S1,S2"


# ---------- add_to_specific ----------
def test_add_to_specific_sets_and_is_idempotent(db, make_component):
    comp = make_component("C1")

    first = association_service.add_to_specific(db, "S1", [comp.id])
    assert [c.as_dict() for c in first] == [
        {"component_id": comp.id, "component_code": "C1", "old_sku_code": None, "new_sku_code": "S1"}
    ]
    assert _value(db, comp.id) == "S1"

    again = association_service.add_to_specific(db, "S1", [comp.id])
    assert again == []
    assert _value(db, comp.id) == "S1"


def test_add_to_specific_appends_at_end(db, make_component):
    comp = make_component("C1", "S2,S3")
    association_service.add_to_specific(db, "S1", [comp.id])
    assert _value(db, comp.id) == "S2,S3,S1"


def test_add_to_specific_skips_missing_and_inactive(db, make_component):
    inactive = make_component("C-OFF", is_active=False)
    changes = association_service.add_to_specific(db, "S1", [None, 9999, inactive.id])
    assert changes == []
    assert _value(db, inactive.id) is None


def test_add_to_specific_records_row_failure(db, make_component, monkeypatch):
    bad = make_component("C-BAD")
    good = make_component("C-GOOD", "S2")

    real_set = component_repo.set_sku_codes

    def flaky_set(session, component, value):
        if component.id == bad.id:
            raise OperationalError("UPDATE component_details", {}, Exception("disk full"))
        return real_set(session, component, value)

    monkeypatch.setattr(component_repo, "set_sku_codes", flaky_set)

    changes = association_service.add_to_specific(db, "S1", [bad.id, good.id])

    assert changes[0].as_dict() == {"component_id": bad.id, "error": changes[0].error}
    assert "disk full" in changes[0].error
    assert changes[1].ok
    assert _value(db, good.id) == "S2,S1"


# ---------- remove all, then add back ----------
@pytest.mark.parametrize(
    "start",
    [
        {"A": None, "B": None, "C": None},
        {"A": "S1", "B": "S9,S1", "C": "S1,S10"},
        {"A": "S10", "B": "S1,S1", "C": "S2"},
        {"A": None, "B": "S2, S1", "C": " S1 ,S3"},
    ],
)
def test_reassignment_matches_target_set(db, make_component, start):
    comps = {code: make_component(code, raw) for code, raw in start.items()}
    targets = [comps["A"].id, comps["C"].id]

    association_service.remove_from_all(db, "S1")
    association_service.add_to_specific(db, "S1", targets)

    db.expire_all()
    for code, comp in comps.items():
        tokens = sku_codes.decode(db.get(ComponentDetail, comp.id).sku_code)
        expected = 1 if comp.id in targets else 0
        assert tokens.count("S1") == expected, code


def test_summarize_shape(db, make_component):
    make_component("C1", "S1")
    changes = association_service.remove_from_all(db, "S1")
    summary = association_service.summarize("Removed", changes)
    assert summary["message"] == "Removed"
    assert summary["updated_components"] == 1
    assert summary["details"][0]["component_code"] == "C1"
