from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional


SEPARATOR = ","
LIKE_ESCAPE = "\\"



'''
component_details.sku_code 是逗号分隔的 SKU 编码串，这里是它的编解码：
  - 库里存字符串，代码里一律当成“有序、去重的编码列表”处理
  - 空关联一律存 NULL，不会出现 "" / "," / ",,"
'''
def decode(raw: Optional[str]) -> List[str]:
    """Split a stored value into distinct, trimmed tokens (first occurrence wins)."""
    if not raw:
        return []
    seen: set[str] = set()
    codes: List[str] = []
    for token in raw.split(SEPARATOR):
        token = token.strip()
        if not token or token in seen:
            continue
        seen.add(token)
        codes.append(token)
    return codes


def encode(codes: Iterable[str]) -> Optional[str]:
    """Join tokens back into the stored form; an empty list becomes None."""
    tokens = decode(SEPARATOR.join(c for c in codes if c))
    return SEPARATOR.join(tokens) if tokens else None


def normalize(raw: Optional[str]) -> Optional[str]:
    return encode(decode(raw))


def contains(raw: Optional[str], code: str) -> bool:
    return code.strip() in decode(raw)


def remove(raw: Optional[str], code: str) -> Optional[str]:
    """Drop exactly the `code` token; `SKU1` never matches inside `SKU10`."""
    target = code.strip()
    return encode(c for c in decode(raw) if c != target)


def append(raw: Optional[str], code: str) -> Optional[str]:
    """Add `code` as the last token; unchanged (but normalized) when it is already present."""
    codes = decode(raw)
    target = code.strip()
    if target and target not in codes:
        codes.append(target)
    return encode(codes)


def _escape_like(value: str) -> str:
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def like_pattern(code: str) -> str:
    """
    SQL 侧预筛：只要串里出现过该编码就取回（含 "S2, S1" 这种带空格的脏数据）。
    是否真正命中以 contains() 的分词结果为准，S1 不会命中 S10。
    """
    return f"%{_escape_like(code.strip())}%"



# ---------- 批量结果累加器 ----------
@dataclass(slots=True)
class AssociationChange:
    """One component touched by a batch association operation: either a before/after pair or an error."""

    component_id: Any
    component_code: Optional[str] = None
    old_sku_code: Optional[str] = None
    new_sku_code: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            out: Dict[str, Any] = {"component_id": self.component_id}
            if self.component_code is not None:
                out["component_code"] = self.component_code
            out["error"] = self.error
            return out
        return {
            "component_id": self.component_id,
            "component_code": self.component_code,
            "old_sku_code": self.old_sku_code,
            "new_sku_code": self.new_sku_code,
        }
