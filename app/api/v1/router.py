# app/api/v1/router.py
from fastapi import APIRouter, Depends, HTTPException

from app.api.v1.auth import router as auth_router
from app.config.settings import settings
from app.core.auth.dependencies import get_current_user
from app.core.navigation import (
    can_access, get_available_modules, get_module, initial_module, theme_for
)
from app.shared.database.models import Usuario

from app.modules.ventas import ventas_router
from app.modules.productos import productos_router
from app.modules.reportes import reportes_router
from app.modules.database import database_router

# Crear router principal de la API v1
api_router = APIRouter(prefix="/api/v1")

# ==================== RUTAS ====================

api_router.include_router(auth_router, prefix="/auth", tags=["authentication"])
api_router.include_router(ventas_router)
api_router.include_router(productos_router)
api_router.include_router(reportes_router)
api_router.include_router(database_router)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/")
async def api_root():
    """Root endpoint de la API"""
    return {
        "message": "Tienda Manager API v1",
        "version": settings.version,
        "status": "active",
        "available_endpoints": {
            "authentication": "/api/v1/auth",
            "modules": "/api/v1/modules",
            "sales": "/api/v1/ventas",
            "products": "/api/v1/productos",
            "reports": "/api/v1/reportes",
            "database": "/api/v1/database"
        }
    }

@api_router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version
    }

# ==================== NAVEGACIÓN POR ROL ====================

@api_router.get("/modules")
async def list_modules(
    current_user: Usuario = Depends(get_current_user)
):
    """
    Módulos visibles en el menú para el rol del usuario
    """
    return {
        "success": True,
        "rol": current_user.rol,
        "theme": theme_for(current_user.rol),
        "initial_module": initial_module(current_user.rol),
        "modules": [module.model_dump() for module in get_available_modules(current_user.rol)]
    }

@api_router.get("/modules/{module_id}")
async def navigate_to_module(
    module_id: str,
    current_user: Usuario = Depends(get_current_user)
):
    """Verificar acceso a un módulo antes de navegar"""
    module = get_module(module_id)
    if module is None:
        raise HTTPException(status_code=404, detail="Módulo no encontrado")
    if not can_access(current_user.rol, module_id):
        raise HTTPException(status_code=403, detail=f"Acceso denegado a {module.label}")
    return {
        "success": True,
        "module": module.model_dump()
    }
