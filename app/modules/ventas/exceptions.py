# app/modules/ventas/exceptions.py
"""
Errores del punto de venta.

Los guardas del carrito y del cobro devuelven estos errores dentro de su
resultado en lugar de lanzarlos; solo `CatalogUnavailable` se propaga como
excepción. Los routers los traducen a `HTTPException`.
"""
from typing import Any, Dict, Optional

class PosError(Exception):
    """Error recuperable del punto de venta"""

    code = "pos_error"
    status_code = 400
    default_message = "Error en el punto de venta"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message}

class StockExceeded(PosError):
    code = "stock_exceeded"
    status_code = 409
    default_message = "No hay suficiente stock disponible"

class InvalidPayment(PosError):
    code = "invalid_payment"
    status_code = 400
    default_message = "El pago recibido debe ser mayor o igual al total"

class CatalogUnavailable(PosError):
    code = "catalog_unavailable"
    status_code = 503
    default_message = "No se pudo cargar el catálogo de productos"

class SaleRecordingFailed(PosError):
    code = "sale_recording_failed"
    status_code = 502
    default_message = "Error al registrar venta"

class ProductUnavailable(PosError):
    code = "product_unavailable"
    status_code = 404
    default_message = "Producto no disponible"

class EmptyCart(PosError):
    code = "empty_cart"
    status_code = 400
    default_message = "El carrito está vacío"

class CheckoutClosed(PosError):
    code = "checkout_closed"
    status_code = 409
    default_message = "No hay un cobro abierto"

class CheckoutInProgress(PosError):
    code = "checkout_in_progress"
    status_code = 409
    default_message = "Hay una venta en proceso"
