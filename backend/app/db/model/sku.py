from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String, Text, func, text
from sqlalchemy.orm import Mapped, mapped_column
from app.db.base import Base



"""
  SKU 明细表（对外主实体，软删除：is_active）
"""
class SkuDetail(Base):

    __tablename__ = "sku_details"

    id:              Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    sku_code:        Mapped[str]           = mapped_column(String(255), index=True, nullable=False)   # 业务主键
    sku_description: Mapped[str]           = mapped_column(Text, nullable=False)
    cm_code:         Mapped[Optional[str]] = mapped_column(String(255), index=True)                   # 工厂/客户分组
    cm_description:  Mapped[Optional[str]] = mapped_column(Text)
    sku_reference:   Mapped[Optional[str]] = mapped_column(String(255))

    is_active:    Mapped[bool]               = mapped_column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_by:   Mapped[Optional[str]]      = mapped_column(String(255))
    created_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), server_default=func.now())

    period:                Mapped[Optional[str]]     = mapped_column(String(64))
    purchased_quantity:    Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 3))
    sku_reference_check:   Mapped[Optional[str]]     = mapped_column(String(255))
    formulation_reference: Mapped[Optional[str]]     = mapped_column(String(255))
    dual_source_sku:       Mapped[Optional[str]]     = mapped_column(String(255))
    site:                  Mapped[Optional[str]]     = mapped_column(String(255))
    skutype:               Mapped[Optional[str]]     = mapped_column(String(64))       # Default / external


    def __repr__(self) -> str:
        return f"<SkuDetail(id={self.id}, sku_code='{self.sku_code}')>"



"""
  组件明细表
  sku_code 列是逗号分隔的 SKU 编码串（没有关联表），只由 association_service 改写
"""
class ComponentDetail(Base):

    __tablename__ = "component_details"

    id:                    Mapped[int]           = mapped_column(Integer, primary_key=True, autoincrement=True)
    component_code:        Mapped[str]           = mapped_column(String(255), index=True, nullable=False)
    component_description: Mapped[Optional[str]] = mapped_column(Text)
    sku_code:              Mapped[Optional[str]] = mapped_column(Text)      # "S1,S2,S3" 或 NULL

    is_active:    Mapped[bool]               = mapped_column(Boolean, nullable=False, default=True, server_default=text("true"))
    created_by:   Mapped[Optional[str]]      = mapped_column(String(255))
    created_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), server_default=func.now())


    def __repr__(self) -> str:
        return f"<ComponentDetail(id={self.id}, component_code='{self.component_code}')>"



"""
  年度/期间字典表，本服务只读
"""
class Period(Base):

    __tablename__ = "period"

    id:        Mapped[int]  = mapped_column(Integer, primary_key=True, autoincrement=True)
    period:    Mapped[str]  = mapped_column(String(64), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text("true"))
