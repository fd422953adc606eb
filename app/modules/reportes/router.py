# app/modules/reportes/router.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.shared.database.models import Usuario
from .service import ReportesService
from .schemas import ReporteResumen

router = APIRouter(prefix="/reportes", tags=["Reportes - Administrador"])

@router.get("/resumen", response_model=ReporteResumen)
async def get_sales_summary(
    fecha_inicio: Optional[date] = Query(None, description="Inicio del periodo (por defecto hace 30 días)"),
    fecha_fin: Optional[date] = Query(None, description="Fin del periodo (por defecto hoy)"),
    vendedor_id: Optional[int] = Query(None, description="Filtrar por vendedor"),
    current_user: Usuario = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    """
    Resumen de ventas del periodo

    **Incluye:**
    - Total vendido, número de transacciones y ticket promedio
    - Ventas por día
    - Productos más vendidos
    - Ventas por vendedor
    """
    service = ReportesService(db)
    return service.get_summary(fecha_inicio, fecha_fin, vendedor_id)
