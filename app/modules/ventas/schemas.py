from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Dict, Any
from datetime import datetime
from decimal import Decimal
from enum import Enum

# ==================== ENUMS ====================

class CheckoutState(str, Enum):
    idle = "idle"
    awaiting_payment = "awaiting_payment"
    submitting = "submitting"
    settled = "settled"
    failed = "failed"

# ==================== CLASE BASE (Pydantic v2) ====================

class VentasBaseModel(BaseModel):
    """
    Clase base para los esquemas del punto de venta,
    con configuración de Pydantic v2.
    """
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

class FrozenModel(VentasBaseModel):
    """Snapshot inmutable"""
    model_config = ConfigDict(frozen=True)

# ==================== CATÁLOGO ====================

class CatalogProduct(FrozenModel):
    id: int
    nombre: str
    precio: Decimal = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    codigo: Optional[str] = None

# ==================== CARRITO ====================

class CartLine(FrozenModel):
    producto_id: int
    nombre: str
    precio: Decimal
    cantidad: int = Field(..., ge=1)
    stock_disponible: int

    @property
    def subtotal(self) -> Decimal:
        return self.precio * self.cantidad

class CartTotals(FrozenModel):
    subtotal: Decimal
    item_count: int

class CartLineView(FrozenModel):
    producto_id: int
    nombre: str
    precio: Decimal
    cantidad: int
    stock_disponible: int
    subtotal: Decimal

class CartSnapshot(FrozenModel):
    lines: List[CartLineView]
    subtotal: Decimal
    item_count: int
    # Carrito vacío no muestra total
    total: Optional[Decimal] = None

    @property
    def is_empty(self) -> bool:
        return not self.lines

# ==================== VENTA ====================

class SaleDraftItem(FrozenModel):
    producto_id: int
    nombre: str
    precio: Decimal
    cantidad: int
    subtotal: Decimal
    stock_restante: int

class SaleDraft(FrozenModel):
    items: List[SaleDraftItem]
    subtotal: Decimal
    total: Decimal
    pago_recibido: Decimal
    cambio: Decimal

class RecordSaleResult(VentasBaseModel):
    success: bool
    error: Optional[str] = None
    venta_id: Optional[int] = None

class CheckoutView(VentasBaseModel):
    state: CheckoutState
    total: Optional[Decimal] = None
    pago_recibido: Optional[Decimal] = None
    cambio: Optional[Decimal] = None
    error: Optional[str] = None
    venta_id: Optional[int] = None

# ==================== REQUEST SCHEMAS ====================

class AddItemRequest(BaseModel):
    producto_id: int = Field(..., description="ID del producto del catálogo")

class SetQuantityRequest(BaseModel):
    cantidad: int = Field(..., description="Nueva cantidad (0 o menos elimina la línea)")

class SubmitPaymentRequest(BaseModel):
    pago: Optional[Decimal] = Field(
        None,
        description="Pago recibido; se omite para reintentar con el último pago"
    )

# ==================== RESPONSE SCHEMAS ====================

class PosSessionResponse(VentasBaseModel):
    session_id: str
    selection_enabled: bool
    catalog_size: int
    cart: CartSnapshot
    checkout: CheckoutView
    # Error de la última carga del catálogo, si falló
    catalog_error: Optional[Dict[str, Any]] = None

class CatalogResponse(VentasBaseModel):
    success: bool
    query: str
    products: List[CatalogProduct]
    message: Optional[str] = None

class ChangeResponse(VentasBaseModel):
    total: Decimal
    pago: Decimal
    cambio: Optional[Decimal]
    show_change: bool

class SaleReceiptResponse(VentasBaseModel):
    success: bool
    venta_id: Optional[int]
    total: Decimal
    pago_recibido: Decimal
    cambio: Decimal
    message: str
    session: PosSessionResponse

class VentaItemResponse(VentasBaseModel):
    id: int
    producto_id: int
    nombre: str
    precio: Decimal
    cantidad: int
    subtotal: Decimal

class VentaResponse(VentasBaseModel):
    id: int
    vendedor_id: int
    subtotal: Decimal
    total: Decimal
    pago_recibido: Decimal
    cambio: Decimal
    fecha: Optional[datetime]
    items: List[VentaItemResponse]

class DailySalesResponse(VentasBaseModel):
    success: bool
    date: str
    sales: List[VentaResponse]

    # Estadísticas del día
    summary: Dict[str, Any] = Field(..., description="Estadísticas consolidadas del día")
