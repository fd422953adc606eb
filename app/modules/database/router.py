# app/modules/database/router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.shared.database.models import Usuario
from .service import DatabaseStatusService

router = APIRouter(prefix="/database", tags=["Base de Datos - Administrador"])

@router.get("/estado")
async def get_database_status(
    current_user: Usuario = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    """
    Estado de la base de datos: motor, registros por tabla y productos sin stock
    """
    service = DatabaseStatusService(db)
    return service.get_status()
