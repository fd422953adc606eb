from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # App Info
    app_name: str = "Tienda Manager API"
    version: str = "2.0.0"
    debug: bool = False
    log_level: str = "INFO"
    
    # Database
    database_url: str
    
    # Security
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 720  # 12 horas
    remember_token_expire_days: int = 30
    
    # CORS
    allowed_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Orígenes permitidos para el frontend"
    )
    
    # Punto de venta
    cart_enforce_stock_ceiling: bool = Field(
        default=False,
        description="Validar también contra el stock al cambiar cantidades manualmente"
    )
    
    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    
    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
