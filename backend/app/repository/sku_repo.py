# sku_details database repository

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ValidationError
from app.db.model.sku import Period, SkuDetail


'''
  对外返回的 SKU 字段（与查询接口的列投影一致）
'''
SKU_FIELDS = (
    "id",
    "sku_code",
    "site",
    "sku_description",
    "cm_code",
    "cm_description",
    "sku_reference",
    "is_active",
    "created_by",
    "created_date",
    "period",
    "purchased_quantity",
    "sku_reference_check",
    "formulation_reference",
    "dual_source_sku",
    "skutype",
)

# 局部更新只允许改这 5 列
UPDATABLE_FIELDS = (
    "sku_description",
    "sku_reference",
    "skutype",
    "site",
    "formulation_reference",
)

# 新增时这些列为空串/缺省 -> NULL
_NULLABLE_INSERT_FIELDS = (
    "cm_code",
    "cm_description",
    "sku_reference",
    "created_by",
    "period",
    "purchased_quantity",
    "sku_reference_check",
    "formulation_reference",
    "dual_source_sku",
    "site",
)


# ---------- Query ----------
def list_by_group(db: Session, cm_code: str) -> List[SkuDetail]:
    stmt = (
        select(SkuDetail)
        .where(SkuDetail.cm_code == cm_code, SkuDetail.is_active.is_(True))
        .order_by(SkuDetail.id.desc())
    )
    return list(db.scalars(stmt))


def list_all(db: Session) -> List[SkuDetail]:
    stmt = select(SkuDetail).where(SkuDetail.is_active.is_(True)).order_by(SkuDetail.id.desc())
    return list(db.scalars(stmt))


def get_by_code(db: Session, sku_code: str) -> Optional[SkuDetail]:
    stmt = (
        select(SkuDetail)
        .where(SkuDetail.sku_code == sku_code)
        .order_by(SkuDetail.is_active.desc(), SkuDetail.id.desc())
    )
    return db.scalars(stmt).first()


def list_active_periods(db: Session) -> List[Period]:
    stmt = select(Period).where(Period.is_active.is_(True)).order_by(Period.id.desc())
    return list(db.scalars(stmt))


def list_descriptions(db: Session) -> List[Dict[str, Any]]:
    """所有 SKU（含已停用）的描述 + 分组，按描述字典序。"""
    stmt = select(
        SkuDetail.sku_description, SkuDetail.cm_code, SkuDetail.cm_description
    ).order_by(SkuDetail.sku_description)
    return [dict(row._mapping) for row in db.execute(stmt)]


# ---------- Mutations ----------
def set_active(db: Session, sku_id: int, is_active: bool) -> Optional[SkuDetail]:
    row = db.get(SkuDetail, sku_id)
    if row is None:
        return None
    row.is_active = is_active
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(row)
    return row


def insert(db: Session, data: Mapping[str, Any]) -> SkuDetail:
    """
    新增一行 SKU：
      - sku_code / sku_description 必填且非空白
      - is_active 只接受真正的 bool，否则 True
      - skutype 缺省 settings.DEFAULT_SKUTYPE；created_date 缺省当前时间
    """
    sku_code = _require_text(data, "sku_code", "A value is required for SKU code")
    sku_description = _require_text(data, "sku_description", "A value is required for SKU description")

    is_active = data.get("is_active")
    row = SkuDetail(
        sku_code=sku_code,
        sku_description=sku_description,
        is_active=is_active if isinstance(is_active, bool) else True,
        created_date=data.get("created_date") or datetime.now(timezone.utc),
        skutype=data.get("skutype") or settings.DEFAULT_SKUTYPE,
        **{k: data.get(k) or None for k in _NULLABLE_INSERT_FIELDS},
    )
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(row)
    return row


def update_partial(db: Session, sku_code: str, fields: Mapping[str, Any]) -> Optional[SkuDetail]:
    """
    只更新 fields 里出现的列（显式 None 也写入）；按 sku_code 定位。
    fields 为空时不写库，只返回当前行（用于仅调整 component 的请求）。
    没有匹配行返回 None。
    """
    values = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    if not values:
        return get_by_code(db, sku_code)

    stmt = update(SkuDetail).where(SkuDetail.sku_code == sku_code).values(**values)
    try:
        res = db.execute(stmt)
        if not res.rowcount:
            db.rollback()
            return None
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return get_by_code(db, sku_code)


def _require_text(data: Mapping[str, Any], key: str, message: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value
