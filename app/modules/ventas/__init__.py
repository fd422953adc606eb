# app/modules/ventas/__init__.py
"""
Módulo de Ventas - Punto de Venta

- Catálogo en memoria por activación de la vista
- Carrito con tope de stock por producto
- Cobro con cálculo de cambio y registro único de la venta
- Consulta de ventas del día

Arquitectura:
- cart.py / checkout.py / session.py: motor del punto de venta (en memoria)
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio (catálogo y registro de ventas)
- repository.py: Acceso a datos
- schemas.py: Modelos Pydantic
"""

from .router import router as ventas_router
from .service import VentasService
from .repository import VentasRepository
from .session import PosSessionRegistry

__all__ = [
    "ventas_router",
    "VentasService",
    "VentasRepository",
    "PosSessionRegistry"
]
