# app/modules/reportes/service.py
from collections import OrderedDict
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from .repository import ReportesRepository
from .schemas import ProductoTop, ReporteResumen, VentasPorDia, VentasPorVendedor

DEFAULT_PERIOD_DAYS = 30

class ReportesService:
    """
    Reportes y estadísticas de ventas (administrador)
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = ReportesRepository(db)

    def get_summary(
        self,
        fecha_inicio: Optional[date] = None,
        fecha_fin: Optional[date] = None,
        vendedor_id: Optional[int] = None
    ) -> ReporteResumen:
        fecha_fin = fecha_fin or date.today()
        fecha_inicio = fecha_inicio or fecha_fin - timedelta(days=DEFAULT_PERIOD_DAYS - 1)
        if fecha_inicio > fecha_fin:
            raise HTTPException(status_code=400, detail="La fecha de inicio debe ser anterior a la fecha fin")

        ventas = self.repository.get_sales(fecha_inicio, fecha_fin, vendedor_id)

        # Calcular métricas
        total_ventas = sum((v.total for v in ventas), Decimal("0"))
        total_transacciones = len(ventas)
        ticket_promedio = (
            (total_ventas / total_transacciones).quantize(Decimal("0.01"))
            if total_transacciones else Decimal("0")
        )

        por_dia = OrderedDict()
        for venta in ventas:
            dia = venta.fecha.date()
            total, count = por_dia.get(dia, (Decimal("0"), 0))
            por_dia[dia] = (total + venta.total, count + 1)

        top_productos = [
            ProductoTop(
                producto_id=row.producto_id,
                nombre=row.nombre,
                cantidad=int(row.cantidad or 0),
                total=Decimal(row.total or 0)
            )
            for row in self.repository.get_top_products(fecha_inicio, fecha_fin, vendedor_id)
        ]

        por_vendedor = [
            VentasPorVendedor(
                vendedor_id=row.id,
                nombre=row.nombre,
                total=Decimal(row.total or 0),
                transacciones=row.transacciones
            )
            for row in self.repository.get_sales_by_seller(fecha_inicio, fecha_fin, vendedor_id)
        ]

        return ReporteResumen(
            fecha_inicio=fecha_inicio,
            fecha_fin=fecha_fin,
            vendedor_id=vendedor_id,
            total_ventas=total_ventas,
            total_transacciones=total_transacciones,
            ticket_promedio=ticket_promedio,
            productos_vendidos=sum(item.cantidad for venta in ventas for item in venta.items),
            ventas_por_dia=[
                VentasPorDia(fecha=dia, total=total, transacciones=count)
                for dia, (total, count) in por_dia.items()
            ],
            top_productos=top_productos,
            ventas_por_vendedor=por_vendedor
        )
