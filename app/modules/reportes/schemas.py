from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import date
from decimal import Decimal

class ReportesBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={Decimal: float}
    )

class VentasPorDia(ReportesBaseModel):
    fecha: date
    total: Decimal
    transacciones: int

class ProductoTop(ReportesBaseModel):
    producto_id: int
    nombre: str
    cantidad: int
    total: Decimal

class VentasPorVendedor(ReportesBaseModel):
    vendedor_id: int
    nombre: str
    total: Decimal
    transacciones: int

class ReporteResumen(ReportesBaseModel):
    success: bool = True
    fecha_inicio: date
    fecha_fin: date
    vendedor_id: Optional[int] = None
    total_ventas: Decimal
    total_transacciones: int
    ticket_promedio: Decimal
    productos_vendidos: int
    ventas_por_dia: List[VentasPorDia]
    top_productos: List[ProductoTop]
    ventas_por_vendedor: List[VentasPorVendedor]
