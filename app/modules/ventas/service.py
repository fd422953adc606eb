# app/modules/ventas/service.py
import logging
from datetime import date
from decimal import Decimal
from typing import List

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.shared.database.models import Usuario
from .exceptions import CatalogUnavailable
from .repository import VentasRepository
from .schemas import (
    CatalogProduct, DailySalesResponse, RecordSaleResult, SaleDraft, VentaResponse
)

logger = logging.getLogger(__name__)

class VentasService:
    """
    Servicio de ventas: catálogo para el punto de venta y registro de ventas
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = VentasRepository(db)

    # ==================== CATÁLOGO ====================

    async def fetch_active_catalog(self) -> List[CatalogProduct]:
        """
        Catálogo de productos activos para el punto de venta
        """
        try:
            products = self.repository.get_active_products()
        except SQLAlchemyError as e:
            logger.error(f"Error consultando productos activos: {e}")
            raise CatalogUnavailable() from e

        return [
            CatalogProduct(
                id=p.id,
                nombre=p.nombre,
                precio=Decimal(p.precio or 0),
                stock=p.stock or 0,
                codigo=p.codigo
            )
            for p in products
        ]

    # ==================== REGISTRO DE VENTAS ====================

    async def record_sale(self, draft: SaleDraft, vendedor_id: int) -> RecordSaleResult:
        """
        Registrar la venta y descontar stock en una sola transacción.

        El stock se vuelve a validar contra la base de datos; cualquier
        problema deja la transacción sin efecto y se informa en el resultado.
        """
        if not draft.items:
            return RecordSaleResult(success=False, error="La venta no tiene productos")

        items_total = sum((item.subtotal for item in draft.items), Decimal("0"))
        if items_total != draft.total:
            return RecordSaleResult(
                success=False,
                error=f"El total ({draft.total}) no coincide con los productos ({items_total})"
            )
        if draft.pago_recibido < draft.total:
            return RecordSaleResult(success=False, error="Pago insuficiente")

        try:
            # 1. Validar y descontar stock
            for item in draft.items:
                product = self.repository.get_product_for_update(item.producto_id)
                if not product or not product.is_active:
                    self.db.rollback()
                    return RecordSaleResult(
                        success=False,
                        error=f"Producto no disponible: {item.nombre}"
                    )
                if product.stock < item.cantidad:
                    self.db.rollback()
                    return RecordSaleResult(
                        success=False,
                        error=f"Stock insuficiente para {product.nombre} (disponible: {product.stock})"
                    )
                product.stock -= item.cantidad

            # 2. Crear la venta
            venta = self.repository.create_venta(
                vendedor_id=vendedor_id,
                subtotal=draft.subtotal,
                total=draft.total,
                pago_recibido=draft.pago_recibido,
                cambio=draft.cambio
            )

            # 3. Crear items
            for item in draft.items:
                self.repository.create_venta_item(
                    venta_id=venta.id,
                    producto_id=item.producto_id,
                    nombre=item.nombre,
                    precio=item.precio,
                    cantidad=item.cantidad,
                    subtotal=item.subtotal
                )

            self.db.commit()

        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error de base de datos registrando venta: {e}")
            return RecordSaleResult(success=False, error="Error de base de datos al registrar la venta")

        logger.info(f"Venta {venta.id} registrada por usuario {vendedor_id}: {draft.total}")
        return RecordSaleResult(success=True, venta_id=venta.id)

    # ==================== CONSULTAS ====================

    def get_sale(self, venta_id: int, current_user: Usuario) -> VentaResponse:
        venta = self.repository.get_venta_by_id(venta_id)
        # Un vendedor solo ve sus propias ventas
        if not venta or (not current_user.is_admin and venta.vendedor_id != current_user.id):
            raise HTTPException(status_code=404, detail="Venta no encontrada")
        return VentaResponse.model_validate(venta)

    def get_daily_sales(self, vendedor_id: int, day: date) -> DailySalesResponse:
        """
        Consultar las ventas realizadas en el día
        """
        ventas = self.repository.get_ventas_by_vendedor_and_date(vendedor_id, day)

        total_amount = sum((venta.total for venta in ventas), Decimal("0"))
        total_items = sum(item.cantidad for venta in ventas for item in venta.items)

        return DailySalesResponse(
            success=True,
            date=day.isoformat(),
            sales=[VentaResponse.model_validate(venta) for venta in ventas],
            summary={
                "total_sales": len(ventas),
                "total_amount": float(total_amount),
                "total_items": total_items,
                "average_ticket": float(total_amount / len(ventas)) if ventas else 0.0
            }
        )
