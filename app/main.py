from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.config.settings import settings
from app.core.middleware import setup_logging, setup_middleware
from app.api.v1.router import api_router
from app.modules.ventas import PosSessionRegistry

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    print("🚀 Tienda Manager API Starting...")
    print(f"📍 Version: {settings.version}")
    print(f"🌍 Environment: {'Development' if settings.debug else 'Production'}")
    print(f"🔐 JWT Algorithm: {settings.algorithm}")

    yield

    # Shutdown
    print(f"🛑 Tienda Manager API Shutting down... ({len(app.state.pos_sessions)} sesiones de venta abiertas)")

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Punto de venta: catálogo, carrito, cobro, ventas y reportes",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

# Sesiones de venta en memoria (una por vista activa)
app.state.pos_sessions = PosSessionRegistry()

# Setup middleware
setup_middleware(app)

# Include routers
app.include_router(api_router)

# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "🏪 Tienda Manager API",
        "version": settings.version,
        "status": "running",
        "docs": "/docs" if settings.debug else "Disabled in production",
        "api": "/api/v1"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
