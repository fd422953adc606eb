# app/modules/ventas/session.py
"""
Sesión del punto de venta.

Cada activación de la vista de ventas crea una `PosSession` con su propio
catálogo en memoria, carrito y cobro. El registro se guarda en `app.state`
y se destruye al salir de la vista.
"""
import logging
import uuid
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

from .cart import Cart, CartResult
from .checkout import CheckoutFlow, CheckoutResult, RecordSale
from .exceptions import (
    CatalogUnavailable, CheckoutClosed, CheckoutInProgress, PosError, ProductUnavailable
)
from .schemas import CatalogProduct, CheckoutState, CheckoutView

logger = logging.getLogger(__name__)

FetchCatalog = Callable[[], Awaitable[List[CatalogProduct]]]

class CatalogCache:
    """Snapshot de productos activos cargado una vez por activación"""

    def __init__(self):
        self._products: Dict[int, CatalogProduct] = {}
        self.loaded_at: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self._products)

    @property
    def products(self) -> List[CatalogProduct]:
        return list(self._products.values())

    async def load(self, fetch: FetchCatalog) -> List[CatalogProduct]:
        try:
            products = await fetch()
        except CatalogUnavailable:
            self._products = {}
            raise
        except Exception as e:
            self._products = {}
            logger.error(f"Error cargando catálogo: {e}")
            raise CatalogUnavailable() from e

        self._products = {product.id: product for product in products}
        self.loaded_at = datetime.now()
        return self.products

    def get(self, producto_id: int) -> Optional[CatalogProduct]:
        return self._products.get(producto_id)

    def search(self, query: str = "") -> List[CatalogProduct]:
        """Productos con stock, filtrados por nombre o código"""
        q = (query or "").lower().strip()
        return [
            product for product in self._products.values()
            if product.stock > 0 and (
                not q
                or q in product.nombre.lower()
                or (product.codigo and q in product.codigo.lower())
            )
        ]

class PosSession:
    """
    Contexto de una vista de ventas: catálogo, carrito y cobro
    """

    def __init__(self, session_id: str, user_id: int, enforce_stock_ceiling: bool = False):
        self.session_id = session_id
        self.user_id = user_id
        self.catalog = CatalogCache()
        self.cart = Cart(enforce_stock_ceiling=enforce_stock_ceiling)
        self.checkout: Optional[CheckoutFlow] = None
        self.selection_enabled = False
        self.catalog_error: Optional[CatalogUnavailable] = None
        self.closed = False
        self.created_at = datetime.now()

    # ==================== CATÁLOGO ====================

    async def load_catalog(self, fetch: FetchCatalog) -> List[CatalogProduct]:
        # Selección deshabilitada mientras se recarga y tras una carga fallida
        self.selection_enabled = False
        try:
            products = await self.catalog.load(fetch)
        except CatalogUnavailable as e:
            self.catalog_error = e
            raise

        self.catalog_error = None
        self.selection_enabled = not self.closed
        return products

    # ==================== CARRITO ====================

    def add_item(self, producto_id: int) -> CartResult:
        blocked = self._mutation_guard()
        if blocked:
            return CartResult(snapshot=self.cart.snapshot(), error=blocked)
        if not self.selection_enabled:
            return CartResult(
                snapshot=self.cart.snapshot(),
                error=self.catalog_error or CatalogUnavailable("El catálogo se está recargando")
            )

        product = self.catalog.get(producto_id)
        if product is None or product.stock <= 0:
            return CartResult(snapshot=self.cart.snapshot(), error=ProductUnavailable())

        return self._after_mutation(self.cart.add_item(product))

    def set_quantity(self, producto_id: int, cantidad: int) -> CartResult:
        blocked = self._mutation_guard()
        if blocked:
            return CartResult(snapshot=self.cart.snapshot(), error=blocked)
        return self._after_mutation(self.cart.set_quantity(producto_id, cantidad))

    def remove_item(self, producto_id: int) -> CartResult:
        blocked = self._mutation_guard()
        if blocked:
            return CartResult(snapshot=self.cart.snapshot(), error=blocked)
        return self._after_mutation(self.cart.remove_item(producto_id))

    def clear_cart(self) -> CartResult:
        blocked = self._mutation_guard()
        if blocked:
            return CartResult(snapshot=self.cart.snapshot(), error=blocked)
        return self._after_mutation(self.cart.clear())

    def _mutation_guard(self) -> Optional[PosError]:
        if self.checkout and self.checkout.state == CheckoutState.submitting:
            return CheckoutInProgress()
        return None

    def _after_mutation(self, result: CartResult) -> CartResult:
        # El total del cobro abierto quedaría desactualizado
        if result.ok and self.checkout and self.checkout.state in (
            CheckoutState.awaiting_payment, CheckoutState.failed
        ):
            self.checkout.cancel()
        return result

    # ==================== COBRO ====================

    def open_checkout(self) -> CheckoutResult:
        if self.checkout is None or self.checkout.state == CheckoutState.settled:
            self.checkout = CheckoutFlow(self.cart)
        return self.checkout.open_checkout()

    def update_change(self, pago: Any):
        if not self.checkout or not self.checkout.is_open:
            return None
        return self.checkout.update_change(pago)

    async def submit(
        self,
        pago: Any,
        record_sale: RecordSale,
        fetch_catalog: FetchCatalog
    ) -> CheckoutResult:
        if self.checkout is None:
            return CheckoutResult(state=CheckoutState.idle, error=CheckoutClosed())

        result = await self.checkout.submit(pago, record_sale)

        # El stock se descuenta en el servidor; recargar antes de volver a vender,
        # salvo que la sesión se haya cerrado durante el registro
        if result.ok and result.state == CheckoutState.settled and not self.closed:
            try:
                await self.load_catalog(fetch_catalog)
            except CatalogUnavailable as e:
                logger.warning(f"Venta registrada pero el catálogo no se pudo recargar: {e.message}")

        return result

    def acknowledge_error(self) -> CheckoutResult:
        if self.checkout is None:
            return CheckoutResult(state=CheckoutState.idle, error=CheckoutClosed())
        return self.checkout.acknowledge_error()

    def cancel_checkout(self) -> CheckoutResult:
        if self.checkout is None:
            return CheckoutResult(state=CheckoutState.idle)
        return self.checkout.cancel()

    def checkout_view(self) -> CheckoutView:
        if self.checkout is None:
            return CheckoutView(state=CheckoutState.idle)
        return self.checkout.view()

    def close(self):
        self.closed = True
        self.cart.clear()
        self.checkout = None
        self.selection_enabled = False

class PosSessionRegistry:
    """Sesiones de venta activas, una por usuario"""

    def __init__(self):
        self._sessions: Dict[str, PosSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, user_id: int, enforce_stock_ceiling: bool = False) -> PosSession:
        # Navegar de nuevo a ventas limpia la sesión anterior del usuario
        for session_id in [s.session_id for s in self._sessions.values() if s.user_id == user_id]:
            self.close(session_id)

        session = PosSession(
            session_id=uuid.uuid4().hex,
            user_id=user_id,
            enforce_stock_ceiling=enforce_stock_ceiling
        )
        self._sessions[session.session_id] = session
        logger.info(f"Sesión de venta {session.session_id} creada para usuario {user_id}")
        return session

    def get(self, session_id: str, user_id: int) -> Optional[PosSession]:
        session = self._sessions.get(session_id)
        if session is None or session.user_id != user_id:
            return None
        return session

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info(f"Sesión de venta {session_id} cerrada")
        return True
