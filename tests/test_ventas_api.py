from decimal import Decimal

import pytest
from sqlalchemy import event

from app.modules.ventas.exceptions import CatalogUnavailable
from app.modules.ventas.service import VentasService
from app.shared.database.models import Producto, Venta

from .conftest import auth_headers, engine, make_product, make_user

BASE = "/api/v1/ventas"


def money(value):
    return Decimal(str(value))


@pytest.fixture
def productos(db):
    return {
        "refresco": make_product(db, "Refresco Cola", "100", 5, codigo="REF-001"),
        "galletas": make_product(db, "Galletas", "35.50", 1, codigo="GAL-002"),
        "agua": make_product(db, "Agua Mineral", "20", 0, codigo="AGU-003"),
        "baja": make_product(db, "Producto de baja", "10", 9, is_active=False),
    }


@pytest.fixture
def pos(client, vendedor_headers, productos):
    response = client.post(f"{BASE}/sesiones", headers=vendedor_headers)
    assert response.status_code == 201
    return f"{BASE}/sesiones/{response.json()['session_id']}"


def add(client, pos, headers, producto):
    return client.post(f"{pos}/carrito/items", json={"producto_id": producto.id}, headers=headers)


def test_open_session_loads_catalog(client, vendedor_headers, productos):
    response = client.post(f"{BASE}/sesiones", headers=vendedor_headers)

    data = response.json()
    assert data["selection_enabled"] is True
    assert data["catalog_size"] == 3
    assert data["cart"]["lines"] == []
    assert data["cart"]["total"] is None
    assert data["checkout"]["state"] == "idle"


def test_open_session_reports_catalog_failure(client, vendedor_headers, productos, monkeypatch):
    async def unavailable(self):
        raise CatalogUnavailable()

    monkeypatch.setattr(VentasService, "fetch_active_catalog", unavailable)

    response = client.post(f"{BASE}/sesiones", headers=vendedor_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["selection_enabled"] is False
    assert data["catalog_error"]["code"] == "catalog_unavailable"
    pos = f"{BASE}/sesiones/{data['session_id']}"
    blocked = add(client, pos, vendedor_headers, productos["refresco"])
    assert blocked.status_code == 503

    monkeypatch.undo()
    assert client.post(f"{pos}/catalogo/recargar", headers=vendedor_headers).status_code == 200

    state = client.get(pos, headers=vendedor_headers).json()
    assert state["catalog_error"] is None
    assert state["selection_enabled"] is True
    assert add(client, pos, vendedor_headers, productos["refresco"]).status_code == 200


def test_confirm_sale_loads_user_once(client, pos, vendedor_headers, productos):
    add(client, pos, vendedor_headers, productos["refresco"])
    client.post(f"{pos}/cobro", headers=vendedor_headers)
    user_queries = []

    def count_user_queries(conn, cursor, statement, parameters, context, executemany):
        if statement.lstrip().upper().startswith("SELECT") and "FROM usuarios" in statement:
            user_queries.append(statement)

    event.listen(engine, "before_cursor_execute", count_user_queries)
    try:
        response = client.post(f"{pos}/cobro/confirmar", json={"pago": "100"}, headers=vendedor_headers)
    finally:
        event.remove(engine, "before_cursor_execute", count_user_queries)

    assert response.status_code == 200
    assert len(user_queries) == 1


def test_catalog_search_hides_products_without_stock(client, pos, vendedor_headers):
    all_products = client.get(f"{pos}/catalogo", headers=vendedor_headers).json()
    by_code = client.get(f"{pos}/catalogo", params={"q": "gal-"}, headers=vendedor_headers).json()
    none = client.get(f"{pos}/catalogo", params={"q": "agua"}, headers=vendedor_headers).json()

    assert sorted(p["nombre"] for p in all_products["products"]) == ["Galletas", "Refresco Cola"]
    assert [p["nombre"] for p in by_code["products"]] == ["Galletas"]
    assert none["products"] == []
    assert none["message"] == "No se encontraron productos"


def test_full_sale_flow(client, db, pos, vendedor, vendedor_headers, productos):
    refresco = productos["refresco"]
    add(client, pos, vendedor_headers, refresco)
    cart = add(client, pos, vendedor_headers, refresco).json()

    assert cart["item_count"] == 2
    assert money(cart["subtotal"]) == Decimal("200")

    opened = client.post(f"{pos}/cobro", headers=vendedor_headers)
    assert opened.status_code == 200
    assert opened.json()["checkout"]["state"] == "awaiting_payment"

    change = client.get(f"{pos}/cobro/cambio", params={"pago": "250"}, headers=vendedor_headers).json()
    assert change["show_change"] is True
    assert money(change["cambio"]) == Decimal("50")

    receipt = client.post(f"{pos}/cobro/confirmar", json={"pago": "250"}, headers=vendedor_headers)

    assert receipt.status_code == 200
    data = receipt.json()
    assert money(data["cambio"]) == Decimal("50")
    assert data["session"]["cart"]["lines"] == []
    assert data["session"]["checkout"]["state"] == "settled"

    venta = db.query(Venta).filter(Venta.id == data["venta_id"]).one()
    assert venta.vendedor_id == vendedor.id
    assert money(venta.total) == Decimal("200")
    assert money(venta.pago_recibido) == Decimal("250")
    assert [(i.producto_id, i.cantidad) for i in venta.items] == [(refresco.id, 2)]

    db.expire_all()
    assert db.get(Producto, refresco.id).stock == 3

    # Catálogo recargado con el stock actualizado
    catalogo = client.get(f"{pos}/catalogo", params={"q": "REF"}, headers=vendedor_headers).json()
    assert catalogo["products"][0]["stock"] == 3


def test_stock_ceiling_on_add(client, pos, vendedor_headers, productos):
    assert add(client, pos, vendedor_headers, productos["galletas"]).status_code == 200

    response = add(client, pos, vendedor_headers, productos["galletas"])

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "stock_exceeded"


def test_add_unavailable_product(client, pos, vendedor_headers, productos):
    assert add(client, pos, vendedor_headers, productos["agua"]).status_code == 404
    assert add(client, pos, vendedor_headers, productos["baja"]).status_code == 404


def test_set_quantity_and_remove(client, pos, vendedor_headers, productos):
    refresco = productos["refresco"]
    add(client, pos, vendedor_headers, refresco)
    add(client, pos, vendedor_headers, productos["galletas"])

    updated = client.put(
        f"{pos}/carrito/items/{refresco.id}", json={"cantidad": 3}, headers=vendedor_headers
    ).json()
    assert money(updated["subtotal"]) == Decimal("335.50")

    removed = client.put(
        f"{pos}/carrito/items/{refresco.id}", json={"cantidad": 0}, headers=vendedor_headers
    ).json()
    assert [line["producto_id"] for line in removed["lines"]] == [productos["galletas"].id]

    emptied = client.delete(f"{pos}/carrito", headers=vendedor_headers).json()
    assert emptied["item_count"] == 0
    assert emptied["total"] is None


def test_open_checkout_with_empty_cart(client, pos, vendedor_headers):
    response = client.post(f"{pos}/cobro", headers=vendedor_headers)

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "empty_cart"


def test_insufficient_payment_keeps_checkout_open(client, db, pos, vendedor_headers, productos):
    add(client, pos, vendedor_headers, productos["refresco"])
    client.post(f"{pos}/cobro", headers=vendedor_headers)

    change = client.get(f"{pos}/cobro/cambio", params={"pago": "90"}, headers=vendedor_headers).json()
    response = client.post(f"{pos}/cobro/confirmar", json={"pago": "90"}, headers=vendedor_headers)

    assert change["show_change"] is False
    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "invalid_payment"
    state = client.get(pos, headers=vendedor_headers).json()
    assert state["checkout"]["state"] == "awaiting_payment"
    assert db.query(Venta).count() == 0


def test_failed_recording_can_be_retried(client, db, pos, vendedor_headers, productos):
    refresco = productos["refresco"]
    add(client, pos, vendedor_headers, refresco)
    client.post(f"{pos}/cobro", headers=vendedor_headers)

    # El stock cambia en el servidor después de cargar el catálogo
    refresco.stock = 0
    db.commit()

    failed = client.post(f"{pos}/cobro/confirmar", json={"pago": "100"}, headers=vendedor_headers)

    assert failed.status_code == 502
    assert failed.json()["detail"]["code"] == "sale_recording_failed"
    state = client.get(pos, headers=vendedor_headers).json()
    assert state["checkout"]["state"] == "failed"
    assert state["cart"]["item_count"] == 1

    refresco.stock = 4
    db.commit()

    retried = client.post(f"{pos}/cobro/confirmar", json={}, headers=vendedor_headers)

    assert retried.status_code == 200
    assert money(retried.json()["pago_recibido"]) == Decimal("100")
    assert db.query(Venta).count() == 1


def test_acknowledge_error_and_cancel(client, db, pos, vendedor_headers, productos):
    refresco = productos["refresco"]
    add(client, pos, vendedor_headers, refresco)
    client.post(f"{pos}/cobro", headers=vendedor_headers)
    refresco.is_active = False
    db.commit()
    client.post(f"{pos}/cobro/confirmar", json={"pago": "100"}, headers=vendedor_headers)

    acknowledged = client.post(f"{pos}/cobro/aceptar-error", headers=vendedor_headers).json()
    assert acknowledged["checkout"]["state"] == "awaiting_payment"
    assert acknowledged["checkout"]["error"] is None

    cancelled = client.post(f"{pos}/cobro/cancelar", headers=vendedor_headers).json()
    assert cancelled["checkout"]["state"] == "idle"
    assert cancelled["cart"]["item_count"] == 1


def test_confirm_without_open_checkout(client, pos, vendedor_headers):
    response = client.post(f"{pos}/cobro/confirmar", json={"pago": "100"}, headers=vendedor_headers)

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "checkout_closed"


def test_session_is_private_and_closable(client, db, pos, vendedor_headers, admin_headers):
    assert client.get(pos, headers=admin_headers).status_code == 404

    assert client.delete(pos, headers=vendedor_headers).status_code == 200
    assert client.get(pos, headers=vendedor_headers).status_code == 404


def test_reopening_sales_view_discards_previous_cart(client, pos, vendedor_headers, productos):
    add(client, pos, vendedor_headers, productos["refresco"])

    new_session = client.post(f"{BASE}/sesiones", headers=vendedor_headers).json()

    assert new_session["cart"]["item_count"] == 0
    assert client.get(pos, headers=vendedor_headers).status_code == 404


def test_pos_requires_authentication(client):
    assert client.post(f"{BASE}/sesiones").status_code == 401


def test_daily_sales_and_sale_detail(client, db, pos, vendedor_headers, productos):
    add(client, pos, vendedor_headers, productos["galletas"])
    client.post(f"{pos}/cobro", headers=vendedor_headers)
    venta_id = client.post(
        f"{pos}/cobro/confirmar", json={"pago": "50"}, headers=vendedor_headers
    ).json()["venta_id"]

    hoy = client.get(f"{BASE}/hoy", headers=vendedor_headers).json()
    assert hoy["summary"]["total_sales"] == 1
    assert hoy["summary"]["total_items"] == 1
    assert money(hoy["summary"]["total_amount"]) == Decimal("35.5")

    detail = client.get(f"{BASE}/{venta_id}", headers=vendedor_headers)
    assert detail.status_code == 200
    assert money(detail.json()["cambio"]) == Decimal("14.50")

    otro = make_user(db, "otro@tienda.com", "vendedor")
    assert client.get(f"{BASE}/{venta_id}", headers=auth_headers(otro)).status_code == 404
