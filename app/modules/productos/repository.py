# app/modules/productos/repository.py
from typing import Any, Dict, List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.shared.database.models import Producto

class ProductosRepository:
    """
    Repositorio del catálogo de productos
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, producto_id: int) -> Optional[Producto]:
        return self.db.query(Producto).filter(Producto.id == producto_id).first()

    def get_by_codigo(self, codigo: str) -> Optional[Producto]:
        return self.db.query(Producto).filter(Producto.codigo == codigo).first()

    def search(
        self,
        query: str = "",
        solo_activos: bool = True,
        con_stock: bool = False
    ) -> List[Producto]:
        """
        Buscar productos por nombre o código
        """
        q = self.db.query(Producto)

        if solo_activos:
            q = q.filter(Producto.is_active.is_(True))
        if con_stock:
            q = q.filter(Producto.stock > 0)

        term = (query or "").strip()
        if term:
            q = q.filter(or_(
                Producto.nombre.ilike(f'%{term}%'),
                Producto.codigo.ilike(f'%{term}%')
            ))

        return q.order_by(Producto.nombre).all()

    def create(self, data: Dict[str, Any]) -> Producto:
        producto = Producto(**data)
        self.db.add(producto)
        self.db.commit()
        self.db.refresh(producto)
        return producto

    def update(self, producto: Producto, data: Dict[str, Any]) -> Producto:
        for field, value in data.items():
            setattr(producto, field, value)
        self.db.commit()
        self.db.refresh(producto)
        return producto
