# app/modules/productos/router.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import require_roles
from app.shared.database.models import Usuario
from .service import ProductosService
from .schemas import ProductoCreate, ProductoResponse, ProductoUpdate

router = APIRouter(prefix="/productos", tags=["Productos"])

@router.get("", response_model=List[ProductoResponse])
async def list_products(
    q: str = Query("", description="Buscar por nombre o código"),
    solo_activos: bool = Query(True, description="Excluir productos dados de baja"),
    con_stock: bool = Query(False, description="Solo productos con stock"),
    current_user: Usuario = Depends(require_roles(["admin", "vendedor"])),
    db: Session = Depends(get_db)
):
    service = ProductosService(db)
    return service.list_products(q, solo_activos=solo_activos, con_stock=con_stock)

@router.get("/{producto_id}", response_model=ProductoResponse)
async def get_product(
    producto_id: int,
    current_user: Usuario = Depends(require_roles(["admin", "vendedor"])),
    db: Session = Depends(get_db)
):
    service = ProductosService(db)
    return service.get_product(producto_id)

@router.post("", response_model=ProductoResponse, status_code=201)
async def create_product(
    data: ProductoCreate,
    current_user: Usuario = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    """
    Crear producto (solo administrador)

    **Validaciones:**
    - Código único en el catálogo
    - Precio y stock no negativos
    """
    service = ProductosService(db)
    return service.create_product(data)

@router.put("/{producto_id}", response_model=ProductoResponse)
async def update_product(
    producto_id: int,
    data: ProductoUpdate,
    current_user: Usuario = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    service = ProductosService(db)
    return service.update_product(producto_id, data)

@router.delete("/{producto_id}", response_model=ProductoResponse)
async def deactivate_product(
    producto_id: int,
    current_user: Usuario = Depends(require_roles(["admin"])),
    db: Session = Depends(get_db)
):
    """Dar de baja un producto (baja lógica)"""
    service = ProductosService(db)
    return service.deactivate_product(producto_id)
