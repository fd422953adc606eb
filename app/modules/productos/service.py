# app/modules/productos/service.py
import logging
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.shared.database.models import Producto
from .repository import ProductosRepository
from .schemas import ProductoCreate, ProductoResponse, ProductoUpdate

logger = logging.getLogger(__name__)

class ProductosService:
    """
    Gestión del catálogo de productos
    """

    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductosRepository(db)

    def list_products(
        self,
        query: str = "",
        solo_activos: bool = True,
        con_stock: bool = False
    ) -> List[ProductoResponse]:
        productos = self.repository.search(query, solo_activos=solo_activos, con_stock=con_stock)
        return [ProductoResponse.model_validate(p) for p in productos]

    def get_product(self, producto_id: int) -> ProductoResponse:
        return ProductoResponse.model_validate(self._get_or_404(producto_id))

    def create_product(self, data: ProductoCreate) -> ProductoResponse:
        self._ensure_unique_codigo(data.codigo)
        try:
            producto = self.repository.create(data.model_dump())
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="No se pudo crear el producto (datos duplicados)")

        logger.info(f"Producto creado: {producto.id} - {producto.nombre}")
        return ProductoResponse.model_validate(producto)

    def update_product(self, producto_id: int, data: ProductoUpdate) -> ProductoResponse:
        producto = self._get_or_404(producto_id)
        changes = data.model_dump(exclude_unset=True)

        if "nombre" in changes:
            if not changes["nombre"] or not changes["nombre"].strip():
                raise HTTPException(status_code=400, detail="El nombre no puede estar vacío")
            changes["nombre"] = changes["nombre"].strip()
        if changes.get("codigo") and changes["codigo"] != producto.codigo:
            self._ensure_unique_codigo(changes["codigo"])

        try:
            producto = self.repository.update(producto, changes)
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(status_code=400, detail="No se pudo actualizar el producto (datos duplicados)")

        logger.info(f"Producto actualizado: {producto.id} ({', '.join(changes) or 'sin cambios'})")
        return ProductoResponse.model_validate(producto)

    def deactivate_product(self, producto_id: int) -> ProductoResponse:
        """
        Baja lógica: el producto deja de aparecer en el punto de venta
        pero se conserva para el historial de ventas
        """
        producto = self._get_or_404(producto_id)
        producto = self.repository.update(producto, {"is_active": False})
        logger.info(f"Producto desactivado: {producto.id}")
        return ProductoResponse.model_validate(producto)

    def _get_or_404(self, producto_id: int) -> Producto:
        producto = self.repository.get_by_id(producto_id)
        if not producto:
            raise HTTPException(status_code=404, detail=f"Producto {producto_id} no encontrado")
        return producto

    def _ensure_unique_codigo(self, codigo: Optional[str]):
        if codigo and self.repository.get_by_codigo(codigo):
            raise HTTPException(status_code=400, detail=f"Ya existe un producto con el código {codigo}")
