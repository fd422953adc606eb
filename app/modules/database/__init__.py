"""
Módulo Base de Datos - Estado de la base (solo administrador)
"""

from .router import router as database_router

__all__ = ["database_router"]
