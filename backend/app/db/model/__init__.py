# 聚合导入所有模型，确保都注册到 Base.metadata

from .sku import (
    SkuDetail,
    ComponentDetail,
    Period,
)

__all__ = ["SkuDetail", "ComponentDetail", "Period"]
