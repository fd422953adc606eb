# app/modules/ventas/router.py
import logging
from datetime import date
from decimal import Decimal
from functools import partial
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import settings
from app.core.auth.dependencies import require_roles
from app.shared.database.models import Usuario
from .exceptions import CatalogUnavailable, CheckoutClosed, PosError
from .service import VentasService
from .session import PosSession, PosSessionRegistry
from .schemas import (
    AddItemRequest, CartSnapshot, CatalogResponse, ChangeResponse, DailySalesResponse,
    PosSessionResponse, SaleReceiptResponse, SetQuantityRequest, SubmitPaymentRequest,
    VentaResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ventas", tags=["Ventas - Punto de Venta"])

POS_ROLES = ["admin", "vendedor"]

# Una sola instancia para que FastAPI la resuelva una vez por request
pos_user = require_roles(POS_ROLES)

# ==================== DEPENDENCIAS ====================

def get_session_registry(request: Request) -> PosSessionRegistry:
    return request.app.state.pos_sessions

def get_pos_session(
    session_id: str,
    current_user: Usuario = Depends(pos_user),
    registry: PosSessionRegistry = Depends(get_session_registry)
) -> PosSession:
    session = registry.get(session_id, current_user.id)
    if session is None:
        raise HTTPException(status_code=404, detail="Sesión de venta no encontrada")
    return session

def raise_pos_error(error: PosError):
    raise HTTPException(status_code=error.status_code, detail=error.to_detail())

def session_response(session: PosSession) -> PosSessionResponse:
    return PosSessionResponse(
        session_id=session.session_id,
        selection_enabled=session.selection_enabled,
        catalog_size=len(session.catalog),
        cart=session.cart.snapshot(),
        checkout=session.checkout_view(),
        catalog_error=session.catalog_error.to_detail() if session.catalog_error else None
    )

# ==================== SESIÓN DE VENTA ====================

@router.post("/sesiones", response_model=PosSessionResponse, status_code=201)
async def open_pos_session(
    current_user: Usuario = Depends(pos_user),
    registry: PosSessionRegistry = Depends(get_session_registry),
    db: Session = Depends(get_db)
):
    """
    Activar la vista de ventas: crea la sesión y carga el catálogo.

    Si el catálogo no se puede cargar la sesión queda creada con la selección
    deshabilitada y el error en `catalog_error`; se puede reintentar con
    `/catalogo/recargar`.
    """
    session = registry.create(
        current_user.id,
        enforce_stock_ceiling=settings.cart_enforce_stock_ceiling
    )
    service = VentasService(db)
    try:
        await session.load_catalog(service.fetch_active_catalog)
    except CatalogUnavailable as e:
        logger.warning(f"Sesión {session.session_id} abierta sin catálogo: {e.message}")
    return session_response(session)

@router.get("/sesiones/{session_id}", response_model=PosSessionResponse)
async def get_pos_session_state(
    session: PosSession = Depends(get_pos_session)
):
    return session_response(session)

@router.delete("/sesiones/{session_id}")
async def close_pos_session(
    session: PosSession = Depends(get_pos_session),
    registry: PosSessionRegistry = Depends(get_session_registry)
):
    """Salir de la vista de ventas: descarta carrito y catálogo"""
    registry.close(session.session_id)
    return {"success": True, "session_id": session.session_id}

# ==================== CATÁLOGO ====================

@router.get("/sesiones/{session_id}/catalogo", response_model=CatalogResponse)
async def search_catalog(
    q: str = "",
    session: PosSession = Depends(get_pos_session)
):
    """
    Productos con stock del catálogo cargado, filtrados por nombre o código
    """
    products = session.catalog.search(q)
    message = None
    if not products:
        message = "No se encontraron productos" if q.strip() else "No hay productos disponibles"
    return CatalogResponse(success=True, query=q, products=products, message=message)

@router.post("/sesiones/{session_id}/catalogo/recargar", response_model=CatalogResponse)
async def reload_catalog(
    session: PosSession = Depends(get_pos_session),
    db: Session = Depends(get_db)
):
    service = VentasService(db)
    try:
        await session.load_catalog(service.fetch_active_catalog)
    except CatalogUnavailable as e:
        raise_pos_error(e)
    return CatalogResponse(success=True, query="", products=session.catalog.search())

# ==================== CARRITO ====================

@router.post("/sesiones/{session_id}/carrito/items", response_model=CartSnapshot)
async def add_cart_item(
    item: AddItemRequest,
    session: PosSession = Depends(get_pos_session)
):
    result = session.add_item(item.producto_id)
    if not result.ok:
        raise_pos_error(result.error)
    return result.snapshot

@router.put("/sesiones/{session_id}/carrito/items/{producto_id}", response_model=CartSnapshot)
async def set_cart_item_quantity(
    producto_id: int,
    data: SetQuantityRequest,
    session: PosSession = Depends(get_pos_session)
):
    result = session.set_quantity(producto_id, data.cantidad)
    if not result.ok:
        raise_pos_error(result.error)
    return result.snapshot

@router.delete("/sesiones/{session_id}/carrito/items/{producto_id}", response_model=CartSnapshot)
async def remove_cart_item(
    producto_id: int,
    session: PosSession = Depends(get_pos_session)
):
    result = session.remove_item(producto_id)
    if not result.ok:
        raise_pos_error(result.error)
    return result.snapshot

@router.delete("/sesiones/{session_id}/carrito", response_model=CartSnapshot)
async def clear_cart(
    session: PosSession = Depends(get_pos_session)
):
    result = session.clear_cart()
    if not result.ok:
        raise_pos_error(result.error)
    return result.snapshot

# ==================== COBRO ====================

@router.post("/sesiones/{session_id}/cobro", response_model=PosSessionResponse)
async def open_checkout(
    session: PosSession = Depends(get_pos_session)
):
    """Abrir el cobro con el total actual del carrito"""
    result = session.open_checkout()
    if not result.ok:
        raise_pos_error(result.error)
    return session_response(session)

@router.get("/sesiones/{session_id}/cobro/cambio", response_model=ChangeResponse)
async def calculate_change(
    pago: Decimal,
    session: PosSession = Depends(get_pos_session)
):
    """Cambio en tiempo real para el pago ingresado"""
    if not session.checkout or not session.checkout.is_open:
        raise_pos_error(CheckoutClosed())
    cambio = session.update_change(pago)
    return ChangeResponse(
        total=session.checkout.total,
        pago=pago,
        cambio=cambio,
        show_change=cambio is not None
    )

@router.post("/sesiones/{session_id}/cobro/confirmar", response_model=SaleReceiptResponse)
async def confirm_sale(
    data: SubmitPaymentRequest,
    session: PosSession = Depends(get_pos_session),
    current_user: Usuario = Depends(pos_user),
    db: Session = Depends(get_db)
):
    """
    Confirmar la venta con el pago recibido.

    Con éxito se limpia el carrito y se recarga el catálogo. Si el registro
    falla el cobro queda en estado `failed` y se puede reintentar sin volver
    a ingresar el pago.
    """
    service = VentasService(db)
    result = await session.submit(
        data.pago,
        record_sale=partial(service.record_sale, vendedor_id=current_user.id),
        fetch_catalog=service.fetch_active_catalog
    )
    if not result.ok:
        raise_pos_error(result.error)

    draft = result.draft
    return SaleReceiptResponse(
        success=True,
        venta_id=result.venta_id,
        total=draft.total,
        pago_recibido=draft.pago_recibido,
        cambio=draft.cambio,
        message="Venta completada",
        session=session_response(session)
    )

@router.post("/sesiones/{session_id}/cobro/aceptar-error", response_model=PosSessionResponse)
async def acknowledge_checkout_error(
    session: PosSession = Depends(get_pos_session)
):
    result = session.acknowledge_error()
    if not result.ok:
        raise_pos_error(result.error)
    return session_response(session)

@router.post("/sesiones/{session_id}/cobro/cancelar", response_model=PosSessionResponse)
async def cancel_checkout(
    session: PosSession = Depends(get_pos_session)
):
    result = session.cancel_checkout()
    if not result.ok:
        raise_pos_error(result.error)
    return session_response(session)

# ==================== CONSULTAS ====================

@router.get("/hoy", response_model=DailySalesResponse)
async def get_today_sales(
    day: Optional[date] = None,
    current_user: Usuario = Depends(pos_user),
    db: Session = Depends(get_db)
):
    """Ventas del usuario en el día (hoy por defecto)"""
    service = VentasService(db)
    return service.get_daily_sales(current_user.id, day or date.today())

@router.get("/{venta_id}", response_model=VentaResponse)
async def get_sale(
    venta_id: int,
    current_user: Usuario = Depends(pos_user),
    db: Session = Depends(get_db)
):
    service = VentasService(db)
    return service.get_sale(venta_id, current_user)
