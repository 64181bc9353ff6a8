from fastapi import APIRouter, Depends
from app.services.auth_service import get_current_user


# 非受保护路由
from .routes_health import router as health_router

# 需要 Bearer Token 的受保护路由
from .sku_details import router as sku_details_router


api_v1 = APIRouter()
api_v1.include_router(health_router)      # /health 不需要登录

# --- 需要登录的接口 ---
protected = APIRouter(dependencies=[Depends(get_current_user)])
protected.include_router(sku_details_router)

# 把受保护路由注册进主路由
api_v1.include_router(protected)
