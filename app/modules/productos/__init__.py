"""
Módulo de Productos - Catálogo

Consulta para administradores y vendedores; alta, edición y baja
solo para administradores.
"""

from .router import router as productos_router
from .service import ProductosService

__all__ = [
    "productos_router",
    "ProductosService"
]
