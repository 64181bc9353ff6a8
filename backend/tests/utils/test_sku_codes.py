"""Pure checks for the comma separated sku_code codec."""

import pytest

from app.utils import sku_codes
from app.utils.sku_codes import AssociationChange


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, []),
        ("", []),
        (",", []),
        ("S1", ["S1"]),
        ("S1,S2,S3", ["S1", "S2", "S3"]),
        (" S1 , S2,,S3, ", ["S1", "S2", "S3"]),
        ("S1,S2,S1", ["S1", "S2"]),
    ],
)
def test_decode_trims_and_dedupes(raw, expected):
    assert sku_codes.decode(raw) == expected


def test_encode_empty_is_none():
    assert sku_codes.encode([]) is None
    assert sku_codes.encode(["", " "]) is None
    assert sku_codes.encode(["S2", "S1"]) == "S2,S1"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("S1,S2,S3", "S2,S3"),      # 开头
        ("S2,S1,S3", "S2,S3"),      # 中间
        ("S2,S3,S1", "S2,S3"),      # 结尾
        ("S1", None),               # 整串
        ("S10", "S10"),             # 不能被 S1 误伤
        ("S10,S1,S11", "S10,S11"),
        ("S2,,S1,", "S2"),          # 顺带规范化
    ],
)
def test_remove_exact_token_only(raw, expected):
    assert sku_codes.remove(raw, "S1") == expected


def test_append_keeps_order_and_skips_duplicates():
    assert sku_codes.append(None, "S1") == "S1"
    assert sku_codes.append("", "S1") == "S1"
    assert sku_codes.append("S2,S3", "S1") == "S2,S3,S1"
    assert sku_codes.append("S2,S1", "S1") == "S2,S1"


def test_contains_is_token_based():
    assert sku_codes.contains("S2, S1", "S1")
    assert not sku_codes.contains("S10,S11", "S1")
    assert not sku_codes.contains(None, "S1")


def test_like_pattern_escapes_wildcards():
    assert sku_codes.like_pattern(" A_1% ") == "%A\\_1\\%%"
    assert sku_codes.like_pattern("a\\b") == "%a\\\\b%"


def test_association_change_as_dict():
    ok = AssociationChange(component_id=1, component_code="C1", old_sku_code="S1,S2", new_sku_code="S2")
    assert ok.ok
    assert ok.as_dict() == {
        "component_id": 1,
        "component_code": "C1",
        "old_sku_code": "S1,S2",
        "new_sku_code": "S2",
    }

    failed = AssociationChange(component_id=7, error="boom")
    assert not failed.ok
    assert failed.as_dict() == {"component_id": 7, "error": "boom"}
