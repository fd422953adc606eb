# app/modules/ventas/repository.py
from datetime import date, datetime, time, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from app.shared.database.models import Producto, Venta, VentaItem

class VentasRepository:
    """
    Repositorio para las operaciones de datos del punto de venta
    """

    def __init__(self, db: Session):
        self.db = db

    # ==================== PRODUCTOS ====================

    def get_active_products(self) -> List[Producto]:
        """
        Productos activos con stock no negativo, ordenados por nombre
        """
        return self.db.query(Producto).filter(
            Producto.is_active.is_(True),
            Producto.stock >= 0
        ).order_by(Producto.nombre).all()

    def get_product_for_update(self, producto_id: int) -> Optional[Producto]:
        """
        Obtener producto bloqueando la fila hasta el commit
        """
        return self.db.query(Producto).filter(
            Producto.id == producto_id
        ).with_for_update().first()

    # ==================== VENTAS ====================

    def create_venta(
        self,
        vendedor_id: int,
        subtotal,
        total,
        pago_recibido,
        cambio
    ) -> Venta:
        venta = Venta(
            vendedor_id=vendedor_id,
            subtotal=subtotal,
            total=total,
            pago_recibido=pago_recibido,
            cambio=cambio,
            fecha=datetime.now()
        )
        self.db.add(venta)
        self.db.flush()
        return venta

    def create_venta_item(
        self,
        venta_id: int,
        producto_id: int,
        nombre: str,
        precio,
        cantidad: int,
        subtotal
    ) -> VentaItem:
        item = VentaItem(
            venta_id=venta_id,
            producto_id=producto_id,
            nombre=nombre,
            precio=precio,
            cantidad=cantidad,
            subtotal=subtotal
        )
        self.db.add(item)
        return item

    def get_venta_by_id(self, venta_id: int) -> Optional[Venta]:
        return self.db.query(Venta).options(
            joinedload(Venta.items)
        ).filter(Venta.id == venta_id).first()

    def get_ventas_by_vendedor_and_date(self, vendedor_id: int, day: date) -> List[Venta]:
        """
        Ventas de un vendedor en un día
        """
        start = datetime.combine(day, time.min)
        end = start + timedelta(days=1)
        return self.db.query(Venta).options(
            joinedload(Venta.items)
        ).filter(
            Venta.vendedor_id == vendedor_id,
            Venta.fecha >= start,
            Venta.fecha < end
        ).order_by(Venta.fecha.desc()).all()
