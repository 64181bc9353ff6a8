from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import configure_logging
from app.api.errors import register_exception_handlers
from app.api.v1 import api_v1
from app.db.session import dispose_engine


logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("%s starting (env=%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    dispose_engine()   # 归还连接池


def create_app() -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    # 前端白名单（逗号分隔），本地可配：
    # BACKEND_CORS_ORIGINS=http://localhost:5173,https://app.local.test:5173
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_v1, prefix=settings.API_PREFIX)

    # 根路径探活（方便 Docker 健康检查）
    @app.get("/")
    def root():
        return {
            "app": settings.PROJECT_NAME,
            "env": settings.ENVIRONMENT,
            "ok": True,
        }

    return app


app = create_app()
