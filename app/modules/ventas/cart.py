# app/modules/ventas/cart.py
"""
Carrito del punto de venta.

Líneas ordenadas por inserción y únicas por producto. Cada operación es
síncrona y devuelve un `CartResult` con el snapshot recalculado; los errores
esperados (stock) viajan en el resultado y el carrito queda sin cambios.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from .exceptions import PosError, StockExceeded
from .schemas import CartLine, CartLineView, CartSnapshot, CartTotals, CatalogProduct

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class CartResult:
    snapshot: CartSnapshot
    error: Optional[PosError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

class Cart:
    """
    Carrito en memoria de una sesión de venta
    """

    def __init__(self, enforce_stock_ceiling: bool = False):
        self._lines: Dict[int, CartLine] = {}
        # Con False, set_quantity no valida contra el stock
        self.enforce_stock_ceiling = enforce_stock_ceiling

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    def get_line(self, producto_id: int) -> Optional[CartLine]:
        return self._lines.get(producto_id)

    # ==================== MUTACIONES ====================

    def add_item(self, product: CatalogProduct) -> CartResult:
        line = self._lines.get(product.id)

        if line is None:
            if product.stock < 1:
                return self._result(StockExceeded(f"{product.nombre} no tiene stock disponible"))
            self._lines[product.id] = CartLine(
                producto_id=product.id,
                nombre=product.nombre,
                precio=product.precio,
                cantidad=1,
                stock_disponible=product.stock
            )
            return self._result()

        # Tope: stock registrado al crear la línea
        if line.cantidad >= line.stock_disponible:
            logger.debug(f"Stock agotado para producto {product.id} ({line.stock_disponible})")
            return self._result(StockExceeded(
                f"No hay suficiente stock disponible de {line.nombre} "
                f"(máximo {line.stock_disponible})"
            ))

        self._lines[product.id] = line.model_copy(update={"cantidad": line.cantidad + 1})
        return self._result()

    def set_quantity(self, producto_id: int, cantidad: int) -> CartResult:
        line = self._lines.get(producto_id)
        if line is None:
            return self._result()

        if cantidad <= 0:
            del self._lines[producto_id]
            return self._result()

        if self.enforce_stock_ceiling and cantidad > line.stock_disponible:
            return self._result(StockExceeded(
                f"No hay suficiente stock disponible de {line.nombre} "
                f"(máximo {line.stock_disponible})"
            ))

        self._lines[producto_id] = line.model_copy(update={"cantidad": cantidad})
        return self._result()

    def remove_item(self, producto_id: int) -> CartResult:
        self._lines.pop(producto_id, None)
        return self._result()

    def clear(self) -> CartResult:
        self._lines.clear()
        return self._result()

    # ==================== LECTURA ====================

    def totals(self) -> CartTotals:
        subtotal = sum((line.subtotal for line in self._lines.values()), Decimal("0"))
        item_count = sum(line.cantidad for line in self._lines.values())
        return CartTotals(subtotal=subtotal, item_count=item_count)

    def snapshot(self) -> CartSnapshot:
        totals = self.totals()
        return CartSnapshot(
            lines=[
                CartLineView(
                    producto_id=line.producto_id,
                    nombre=line.nombre,
                    precio=line.precio,
                    cantidad=line.cantidad,
                    stock_disponible=line.stock_disponible,
                    subtotal=line.subtotal
                )
                for line in self._lines.values()
            ],
            subtotal=totals.subtotal,
            item_count=totals.item_count,
            total=totals.subtotal if self._lines else None
        )

    def _result(self, error: Optional[PosError] = None) -> CartResult:
        return CartResult(snapshot=self.snapshot(), error=error)
