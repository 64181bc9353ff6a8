# SKU 明细相关接口 -> 前端 SKU 页面调用

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.orm import Session

from app.api.errors import persistence_guard
from app.core.errors import NotFoundError, ValidationError
from app.db.session import get_db
from app.repository import sku_repo
from app.repository.sku_repo import SKU_FIELDS, UPDATABLE_FIELDS
from app.services import sku_service
from app.utils.serialization import row_to_dict, to_jsonable


# 鉴权统一挂在 api/v1 的 protected 路由上
router = APIRouter(tags=["sku-details"])


# ---------- Pydantic 模型（请求体） ----------
class ComponentIn(BaseModel):
    model_config = ConfigDict(extra="ignore")

    component_id: Optional[int] = None
    id: Optional[int] = None
    component_code: Optional[str] = None
    component_description: Optional[str] = None
    created_by: Optional[str] = None
    created_date: Optional[datetime] = None
    is_active: Any = None           # 只有真正的 bool 才生效，否则按 True

class SkuData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sku_code: Optional[str] = None
    sku_description: Optional[str] = None
    cm_code: Optional[str] = None
    cm_description: Optional[str] = None
    sku_reference: Optional[str] = None
    is_active: Any = None
    created_by: Optional[str] = None
    created_date: Optional[datetime] = None
    period: Optional[str] = None
    purchased_quantity: Optional[Decimal] = None
    sku_reference_check: Optional[str] = None
    formulation_reference: Optional[str] = None
    dual_source_sku: Optional[str] = None
    site: Optional[str] = None

    # 前端有时把年份当数字传
    @field_validator("period", "cm_code", mode="before")
    @classmethod
    def _number_to_str(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

class SkuCreateRequest(BaseModel):
    sku_data: Optional[SkuData] = None
    components: Optional[List[ComponentIn]] = None

class SkuUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sku_description: Optional[str] = None
    sku_reference: Optional[str] = None
    skutype: Optional[str] = None
    site: Optional[str] = None
    formulation_reference: Optional[str] = None
    components: Optional[List[ComponentIn]] = None

    def supplied_fields(self) -> Dict[str, Any]:
        """只取请求里真正出现过的列；显式 null 也算出现。"""
        return {k: getattr(self, k) for k in UPDATABLE_FIELDS if k in self.model_fields_set}

# ---------- 查询 ----------
@router.get("/sku-details")
def list_sku_details(db: Session = Depends(get_db)):
    with persistence_guard("Failed to fetch SKU details"):
        rows = sku_repo.list_all(db)
    data = [row_to_dict(r, SKU_FIELDS) for r in rows]
    return {"success": True, "count": len(data), "data": data}

@router.get("/sku-details/{cm_code}")
def list_sku_details_by_cm_code(cm_code: str, db: Session = Depends(get_db)):
    with persistence_guard("Failed to fetch SKU details"):
        rows = sku_repo.list_by_group(db, cm_code)
    data = [row_to_dict(r, SKU_FIELDS) for r in rows]
    return {"success": True, "count": len(data), "cm_code": cm_code, "data": data}

@router.get("/sku-details-active-years")
def list_active_years(db: Session = Depends(get_db)):
    with persistence_guard("Failed to fetch years"):
        rows = sku_repo.list_active_periods(db)
    years = [{"id": r.id, "period": r.period} for r in rows]
    return {"success": True, "count": len(years), "years": years}

@router.get("/sku-descriptions")
def list_sku_descriptions(db: Session = Depends(get_db)):
    with persistence_guard("Failed to fetch sku descriptions"):
        rows = sku_repo.list_descriptions(db)
    return {"success": True, "count": len(rows), "data": to_jsonable(rows)}

# ---------- 修改 ----------
@router.patch("/sku-details/{id}/is-active")
def update_is_active(
    id: int = Path(..., description="sku_details.id"),
    payload: Dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
):
    is_active = payload.get("is_active")
    if not isinstance(is_active, bool):
        raise ValidationError("is_active must be a boolean")

    with persistence_guard("Failed to update is_active status"):
        row = sku_repo.set_active(db, id, is_active)
    if row is None:
        raise NotFoundError("SKU detail not found")
    return {"success": True, "data": row_to_dict(row, SKU_FIELDS)}

@router.post("/sku-details/add", status_code=201)
def add_sku_detail(
    body: SkuCreateRequest,
    skutype: Optional[str] = Query(None, description="Default | external"),
    db: Session = Depends(get_db),
):
    sku_data = body.sku_data.model_dump(exclude_unset=True) if body.sku_data is not None else None
    components = [c.model_dump(exclude_unset=True) for c in body.components or []]

    with persistence_guard("Failed to insert SKU detail"):
        result = sku_service.create_sku_with_components(db, sku_data, components, skutype)
    return {"success": True, **result}

@router.put("/sku-details/update/{sku_code}")
def update_sku_detail(
    sku_code: str,
    body: SkuUpdateRequest,
    db: Session = Depends(get_db),
):
    components = [c.model_dump(exclude_unset=True) for c in body.components or []]

    with persistence_guard("Failed to update SKU detail"):
        result = sku_service.update_sku_with_components(db, sku_code, body.supplied_fields(), components)
    return {"success": True, **result}
