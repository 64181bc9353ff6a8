from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import NotFoundError, ValidationError
from app.repository import component_repo, sku_repo
from app.repository.component_repo import COMPONENT_FIELDS
from app.repository.sku_repo import SKU_FIELDS, UPDATABLE_FIELDS
from app.services import association_service
from app.utils.serialization import row_to_dict

logger = logging.getLogger(__name__)

NO_UPDATE_FIELDS_MESSAGE = (
    "At least one field must be provided for update "
    "(sku_description, sku_reference, skutype, site, formulation_reference) or components array"
)

'''
新建 SKU + 顺带挂 component：
  1) 先校验并写入 SKU 行（写入即提交）
  2) 逐个处理 component：已存在则追加 SKU 编码，不存在则新建并预挂该 SKU
     单个 component 失败只记录在 component_results，不影响 SKU 本身
'''
def create_sku_with_components(
    db: Session,
    sku_data: Optional[Mapping[str, Any]],
    components: Optional[Sequence[Mapping[str, Any]]],
    skutype: Optional[str] = None,
) -> Dict[str, Any]:
    if sku_data is None:
        raise ValidationError("sku_data is required")

    data = dict(sku_data)
    data["skutype"] = skutype or settings.DEFAULT_SKUTYPE

    logger.info(
        "sku create: sku_code=%s skutype=%s components=%d",
        data.get("sku_code"), data["skutype"], len(components or []),
    )

    inserted = sku_repo.insert(db, data)
    sku_code = inserted.sku_code

    results: List[Dict[str, Any]] = []
    for component in components or []:
        results.append(_link_component(db, component, data, sku_code))

    return {
        "sku_data": row_to_dict(inserted, SKU_FIELDS),
        "components_processed": len(results),
        "component_results": results,
    }

def _link_component(
    db: Session, component: Mapping[str, Any], sku_data: Mapping[str, Any], sku_code: str
) -> Dict[str, Any]:
    component_code = component.get("component_code")
    if not component_code:
        return {"component_code": component_code, "action": "error", "error": "component_code is required"}

    try:
        existing = component_repo.find_by_code(db, component_code)
        if existing is not None:
            updated = component_repo.append_sku_code(db, component_code, existing.sku_code, sku_code)
            return {
                "component_code": component_code,
                "action": "updated",
                "data": row_to_dict(updated, COMPONENT_FIELDS),
            }

        payload = {
            **component,
            "sku_code": sku_code,
            "created_by": sku_data.get("created_by") or component.get("created_by"),
            "created_date": (
                sku_data.get("created_date")
                or component.get("created_date")
                or datetime.now(timezone.utc)
            ),
        }
        inserted = component_repo.insert(db, payload)
        return {
            "component_code": component_code,
            "action": "inserted",
            "data": row_to_dict(inserted, COMPONENT_FIELDS),
        }
    except SQLAlchemyError as exc:
        logger.warning("sku create: component %s failed for sku_code=%s: %s", component_code, sku_code, exc)
        return {"component_code": component_code, "action": "error", "error": str(exc)}

'''
局部更新 SKU + component 重新分配：
  - 带 components：先从所有 component 摘掉该 SKU，再挂到指定的 component 上
    最终关联集合 == 提交的集合；两步之间不是原子的
  - 不带 components 但 skutype 改成 external：从所有 component 摘掉
'''
def update_sku_with_components(
    db: Session,
    sku_code: Optional[str],
    fields: Mapping[str, Any],
    components: Optional[Sequence[Mapping[str, Any]]] = None,
) -> Dict[str, Any]:
    sku_code = (sku_code or "").strip()
    if not sku_code:
        raise ValidationError("A value is required for SKU code")

    values = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    has_update_data = any(v is not None for v in values.values())
    if not has_update_data and not components:
        raise ValidationError(NO_UPDATE_FIELDS_MESSAGE)

    logger.info(
        "sku update: sku_code=%s fields=%s components=%s",
        sku_code, sorted(values), len(components) if components else None,
    )

    updated = sku_repo.update_partial(db, sku_code, values)
    if updated is None:
        raise NotFoundError("SKU detail not found")

    component_updates: Optional[Dict[str, Any]] = None
    if components:
        target_ids = [c.get("component_id") or c.get("id") for c in components]
        removed = association_service.remove_from_all(db, sku_code)
        added = association_service.add_to_specific(db, sku_code, target_ids)
        component_updates = {
            "removed_from_all": association_service.summarize(
                f"Removed SKU code '{sku_code}' from all component details", removed
            ),
            "added_to_specific": association_service.summarize(
                f"Added SKU code '{sku_code}' to specified components", added
            ),
        }
    elif values.get("skutype") == settings.EXTERNAL_SKUTYPE:
        removed = association_service.remove_from_all(db, sku_code)
        component_updates = association_service.summarize(
            f"Removed SKU code '{sku_code}' from all component details", removed
        )

    return {
        "data": row_to_dict(updated, SKU_FIELDS),
        "component_updates": component_updates,
    }
