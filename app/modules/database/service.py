# app/modules/database/service.py
import logging
from typing import Any, Dict

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.shared.database.models import Producto, Usuario, Venta, VentaItem

logger = logging.getLogger(__name__)

TABLES = (Usuario, Producto, Venta, VentaItem)

class DatabaseStatusService:
    """
    Estado de la base de datos para el panel del administrador
    """

    def __init__(self, db: Session):
        self.db = db

    def get_status(self) -> Dict[str, Any]:
        try:
            counts = {
                model.__tablename__: self.db.query(func.count(model.id)).scalar() or 0
                for model in TABLES
            }
            active_products = self.db.query(func.count(Producto.id)).filter(
                Producto.is_active.is_(True)
            ).scalar() or 0
            out_of_stock = self.db.query(func.count(Producto.id)).filter(
                Producto.is_active.is_(True),
                Producto.stock <= 0
            ).scalar() or 0
        except SQLAlchemyError as e:
            logger.error(f"Error consultando estado de la base de datos: {e}")
            raise HTTPException(status_code=503, detail="Base de datos no disponible")

        return {
            "success": True,
            "dialect": self.db.get_bind().dialect.name,
            "tables": counts,
            "products": {
                "active": active_products,
                "out_of_stock": out_of_stock
            }
        }
