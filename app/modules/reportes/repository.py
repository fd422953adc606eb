# app/modules/reportes/repository.py
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from app.shared.database.models import Usuario, Venta, VentaItem

class ReportesRepository:
    """
    Consultas agregadas sobre ventas para reportes
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _range(start_date: date, end_date: date) -> Tuple[datetime, datetime]:
        return datetime.combine(start_date, time.min), datetime.combine(end_date + timedelta(days=1), time.min)

    def get_sales(
        self,
        start_date: date,
        end_date: date,
        vendedor_id: Optional[int] = None
    ) -> List[Venta]:
        start, end = self._range(start_date, end_date)
        query = self.db.query(Venta).filter(Venta.fecha >= start, Venta.fecha < end)
        if vendedor_id:
            query = query.filter(Venta.vendedor_id == vendedor_id)
        return query.order_by(Venta.fecha).all()

    def get_top_products(
        self,
        start_date: date,
        end_date: date,
        vendedor_id: Optional[int] = None,
        limit: int = 10
    ):
        """
        Productos más vendidos por cantidad
        """
        start, end = self._range(start_date, end_date)
        query = self.db.query(
            VentaItem.producto_id,
            func.max(VentaItem.nombre).label('nombre'),
            func.sum(VentaItem.cantidad).label('cantidad'),
            func.sum(VentaItem.subtotal).label('total')
        ).join(
            Venta, VentaItem.venta_id == Venta.id
        ).filter(
            Venta.fecha >= start,
            Venta.fecha < end
        )
        if vendedor_id:
            query = query.filter(Venta.vendedor_id == vendedor_id)

        return query.group_by(VentaItem.producto_id).order_by(
            desc('cantidad')
        ).limit(limit).all()

    def get_sales_by_seller(
        self,
        start_date: date,
        end_date: date,
        vendedor_id: Optional[int] = None
    ):
        start, end = self._range(start_date, end_date)
        query = self.db.query(
            Usuario.id,
            Usuario.nombre,
            func.sum(Venta.total).label('total'),
            func.count(Venta.id).label('transacciones')
        ).join(
            Venta, Venta.vendedor_id == Usuario.id
        ).filter(
            Venta.fecha >= start,
            Venta.fecha < end
        )
        if vendedor_id:
            query = query.filter(Venta.vendedor_id == vendedor_id)

        return query.group_by(Usuario.id, Usuario.nombre).order_by(desc('total')).all()
