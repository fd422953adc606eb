"""
Módulo de Reportes - Estadísticas de ventas (solo administrador)
"""

from .router import router as reportes_router
from .service import ReportesService

__all__ = [
    "reportes_router",
    "ReportesService"
]
