# app/modules/ventas/checkout.py
"""
Flujo de cobro de una venta.

    idle -> awaiting_payment -> submitting -> settled
                  ^                  |
                  +----- failed <----+

`submitting` actúa como candado: un segundo `submit` mientras la venta se
registra no vuelve a llamar al colaborador. `failed` vuelve a
`awaiting_payment` al reconocer el error (o al reintentar).
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Awaitable, Callable, Optional, Union

from .cart import Cart
from .exceptions import (
    CheckoutClosed, CheckoutInProgress, EmptyCart, InvalidPayment,
    PosError, SaleRecordingFailed
)
from .schemas import CheckoutState, CheckoutView, RecordSaleResult, SaleDraft, SaleDraftItem

logger = logging.getLogger(__name__)

RecordSale = Callable[[SaleDraft], Awaitable[Union[RecordSaleResult, dict]]]

@dataclass(frozen=True)
class CheckoutResult:
    state: CheckoutState
    error: Optional[PosError] = None
    draft: Optional[SaleDraft] = None
    venta_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None

def to_amount(value: Any) -> Optional[Decimal]:
    """Convertir un monto ingresado a Decimal; None si no es un número finito"""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount

def build_sale_draft(cart: Cart, total: Decimal, pago: Decimal) -> SaleDraft:
    """Armar el registro de venta a partir del carrito y el pago recibido"""
    return SaleDraft(
        items=[
            SaleDraftItem(
                producto_id=line.producto_id,
                nombre=line.nombre,
                precio=line.precio,
                cantidad=line.cantidad,
                subtotal=line.subtotal,
                # Estimado del cliente; el servidor descuenta el stock real
                stock_restante=line.stock_disponible - line.cantidad
            )
            for line in cart.lines
        ],
        subtotal=total,
        total=total,
        pago_recibido=pago,
        cambio=pago - total
    )

class CheckoutFlow:
    """
    Máquina de estados del cobro de un carrito
    """

    def __init__(self, cart: Cart):
        self.cart = cart
        self.state = CheckoutState.idle
        self.total: Optional[Decimal] = None
        self.pago: Optional[Decimal] = None
        self.error: Optional[PosError] = None
        self.draft: Optional[SaleDraft] = None
        self.venta_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.state in (
            CheckoutState.awaiting_payment,
            CheckoutState.submitting,
            CheckoutState.failed
        )

    def open_checkout(self) -> CheckoutResult:
        if self.state == CheckoutState.submitting:
            return self._result(CheckoutInProgress())
        if self.state == CheckoutState.settled:
            return self._result(CheckoutClosed("La venta ya fue registrada"))
        if self.cart.is_empty:
            return self._result(EmptyCart())

        self.total = self.cart.totals().subtotal
        self.pago = None
        self.error = None
        self.draft = None
        self.state = CheckoutState.awaiting_payment
        return self._result()

    def update_change(self, pago: Any) -> Optional[Decimal]:
        """Cambio a mostrar para el pago ingresado, o None si no alcanza"""
        if self.total is None:
            return None
        amount = to_amount(pago)
        if amount is None or amount < self.total:
            return None
        return amount - self.total

    async def submit(self, pago: Any, record_sale: RecordSale) -> CheckoutResult:
        if self.state == CheckoutState.submitting:
            logger.warning("Envío duplicado ignorado: la venta ya se está registrando")
            return self._result(CheckoutInProgress())

        if self.state == CheckoutState.failed:
            self.acknowledge_error()

        if self.state != CheckoutState.awaiting_payment:
            return self._result(CheckoutClosed())

        # Reintento sin volver a ingresar el pago
        if pago is None:
            pago = self.pago

        amount = to_amount(pago)
        if amount is None or amount <= 0 or amount < self.total:
            return self._result(InvalidPayment())

        self.pago = amount
        self.draft = build_sale_draft(self.cart, self.total, amount)
        self.state = CheckoutState.submitting

        try:
            outcome = await record_sale(self.draft)
            if isinstance(outcome, dict):
                outcome = RecordSaleResult.model_validate(outcome)
        except Exception as e:
            logger.exception("Error inesperado registrando la venta")
            outcome = RecordSaleResult(success=False, error=str(e) or e.__class__.__name__)

        if not outcome.success:
            self.state = CheckoutState.failed
            self.error = SaleRecordingFailed(
                f"Error al registrar venta: {outcome.error or 'error desconocido'}"
            )
            logger.warning(self.error.message)
            return self._result(self.error)

        self.state = CheckoutState.settled
        self.venta_id = outcome.venta_id
        self.error = None
        self.cart.clear()
        logger.info(
            f"Venta registrada (id={self.venta_id}) total={self.total} "
            f"pago={self.pago} cambio={self.draft.cambio}"
        )
        return self._result()

    def acknowledge_error(self) -> CheckoutResult:
        if self.state == CheckoutState.failed:
            self.state = CheckoutState.awaiting_payment
            self.error = None
        return self._result()

    def cancel(self) -> CheckoutResult:
        if self.state == CheckoutState.submitting:
            return self._result(CheckoutInProgress())
        if self.state in (CheckoutState.awaiting_payment, CheckoutState.failed):
            self.state = CheckoutState.idle
            self.total = None
            self.pago = None
            self.error = None
            self.draft = None
        return self._result()

    def view(self) -> CheckoutView:
        return CheckoutView(
            state=self.state,
            total=self.total,
            pago_recibido=self.pago,
            cambio=self.draft.cambio if self.draft else None,
            error=self.error.message if self.error else None,
            venta_id=self.venta_id
        )

    def _result(self, error: Optional[PosError] = None) -> CheckoutResult:
        return CheckoutResult(
            state=self.state,
            error=error,
            draft=self.draft,
            venta_id=self.venta_id
        )
