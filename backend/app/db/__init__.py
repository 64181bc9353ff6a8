# 导出入口，给脚本/临时建表用

from .session import engine, SessionLocal, get_db, dispose_engine
from app.db.model import *  # 确保把所有模型加载进 Base.metadata
from .base import Base


# 仅开发期/临时使用；生产库表结构由 DBA 维护
"""
    开发期在空库快速建表：
        python -m scripts.create_tables
"""
def create_all(bind=None) -> None:
    Base.metadata.create_all(bind=bind or engine)
