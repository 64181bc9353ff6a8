from __future__ import annotations

from typing import Callable, Dict, Iterator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.base import Base
from app.db.model.sku import ComponentDetail, Period, SkuDetail
from app.db.session import get_db
from app.main import create_app


# ---------- 内存 SQLite：每个用例一份干净的库 ----------
@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@pytest.fixture()
def db(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# ---------- 造数据 ----------
@pytest.fixture()
def make_sku(db: Session) -> Callable[..., SkuDetail]:
    def _make(sku_code: str, **kwargs) -> SkuDetail:
        row = SkuDetail(
            sku_code=sku_code,
            sku_description=kwargs.pop("sku_description", f"{sku_code} description"),
            is_active=kwargs.pop("is_active", True),
            skutype=kwargs.pop("skutype", "Default"),
            **kwargs,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _make


@pytest.fixture()
def make_component(db: Session) -> Callable[..., ComponentDetail]:
    def _make(component_code: str, sku_code: Optional[str] = None, is_active: bool = True) -> ComponentDetail:
        row = ComponentDetail(
            component_code=component_code,
            component_description=f"{component_code} description",
            sku_code=sku_code,
            is_active=is_active,
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _make


@pytest.fixture()
def make_period(db: Session) -> Callable[..., Period]:
    def _make(period: str, is_active: bool = True) -> Period:
        row = Period(period=period, is_active=is_active)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    return _make


# ---------- API ----------
@pytest.fixture()
def app(session_factory: sessionmaker[Session]):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture()
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def auth_headers() -> Dict[str, str]:
    token = create_access_token({"sub": "test-user"})
    return {"Authorization": f"Bearer {token}"}
