# component_details database repository

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.db.model.sku import ComponentDetail
from app.utils import sku_codes


COMPONENT_FIELDS = (
    "id",
    "component_code",
    "component_description",
    "sku_code",
    "is_active",
    "created_by",
    "created_date",
)



# ---------- Query ----------
def find_by_code(db: Session, component_code: str) -> Optional[ComponentDetail]:
    stmt = (
        select(ComponentDetail)
        .where(ComponentDetail.component_code == component_code, ComponentDetail.is_active.is_(True))
        .order_by(ComponentDetail.id.asc())
    )
    return db.scalars(stmt).first()


def get_active(db: Session, component_id: int) -> Optional[ComponentDetail]:
    stmt = select(ComponentDetail).where(
        ComponentDetail.id == component_id, ComponentDetail.is_active.is_(True)
    )
    return db.scalars(stmt).first()


def list_referencing(db: Session, sku_code: str) -> List[ComponentDetail]:
    """
    所有 sku_code 列里含有该编码的 active component。
    SQL 先用 LIKE 粗筛，再按分词精确过滤（逗号前后带空格也算），避免 S1 命中 S10。
    """
    stmt = (
        select(ComponentDetail)
        .where(
            ComponentDetail.sku_code.like(sku_codes.like_pattern(sku_code), escape=sku_codes.LIKE_ESCAPE),
            ComponentDetail.is_active.is_(True),
        )
        .order_by(ComponentDetail.id.asc())
    )
    return [row for row in db.scalars(stmt) if sku_codes.contains(row.sku_code, sku_code)]


# ---------- Mutations ----------
def set_sku_codes(db: Session, component: ComponentDetail, value: Optional[str]) -> ComponentDetail:
    """写回 sku_code 列（已编码的字符串或 None），单行提交。"""
    component.sku_code = value
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(component)
    return component


def insert(db: Session, data: Mapping[str, Any]) -> ComponentDetail:
    is_active = data.get("is_active")
    row = ComponentDetail(
        component_code=data.get("component_code"),
        component_description=data.get("component_description"),
        sku_code=sku_codes.normalize(data.get("sku_code")),
        created_by=data.get("created_by"),
        created_date=data.get("created_date") or datetime.now(timezone.utc),
        is_active=is_active if isinstance(is_active, bool) else True,
    )
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(row)
    return row


def append_sku_code(
    db: Session, component_code: str, current_value: Optional[str], new_sku_code: str
) -> Optional[ComponentDetail]:
    """
    SKU 新建时把新编码追加到已存在的 component（按 component_code 定位）。
    已包含该编码时不重复追加，只做规范化。
    """
    component = find_by_code(db, component_code)
    if component is None:
        return None
    base = current_value if current_value is not None else component.sku_code
    return set_sku_codes(db, component, sku_codes.append(base, new_sku_code))
