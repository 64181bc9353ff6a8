# 环境变量和配置
# pydantic‑settings 读取 .env = core/config.py

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# 本机直接跑 uvicorn 时（不走 Docker），才会用到 model_config.env_file=".env"：
# 此时它会读取 backend/.env

class Settings(BaseSettings):

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # ========= project config =========
    PROJECT_NAME: str = "SKU Details Service"
    ENVIRONMENT: str = "dev"
    API_PREFIX: str = ""                 # 路由直接挂在根路径：/sku-details ...
    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")


    # ========= 鉴权 / CORS =========
    SECRET_KEY: str = Field("CHANGE_ME", alias="SECRET_KEY")
    JWT_ALGORITHM: str = Field("HS256", alias="JWT_ALGORITHM")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(480, alias="ACCESS_TOKEN_EXPIRE_MINUTES")   # 8h
    BACKEND_CORS_ORIGINS: str = "http://localhost:5173"


    # ========= Database =========
    DATABASE_URL: str = Field(
        default="postgresql+psycopg://sdp_user:sdp_pass@db:5432/sdp_dev",
        alias="DATABASE_URL",
    )
    DB_POOL_SIZE: int = Field(10, ge=1, alias="DB_POOL_SIZE")           # 常驻连接
    DB_MAX_OVERFLOW: int = Field(20, ge=0, alias="DB_MAX_OVERFLOW")     # 高峰期额外连接
    DB_POOL_RECYCLE: int = Field(1800, ge=30, alias="DB_POOL_RECYCLE")  # 秒
    DB_ECHO: bool = Field(False, alias="DB_ECHO")


    # ========= SKU rules =========
    DEFAULT_SKUTYPE: str = Field("Default", alias="DEFAULT_SKUTYPE")
    EXTERNAL_SKUTYPE: str = Field("external", alias="EXTERNAL_SKUTYPE")   # external SKU 不挂任何 component


    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.BACKEND_CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()  # 只从环境读取（含 .env）
