from decimal import Decimal

from .conftest import make_product

BASE = "/api/v1/productos"


def test_admin_creates_product(client, admin_headers):
    response = client.post(BASE, json={
        "nombre": "  Café molido 250g ",
        "codigo": "caf-001",
        "precio": "64.90",
        "stock": 12
    }, headers=admin_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["nombre"] == "Café molido 250g"
    assert data["codigo"] == "CAF-001"
    assert Decimal(str(data["precio"])) == Decimal("64.90")
    assert data["is_active"] is True


def test_duplicate_codigo_is_rejected(client, db, admin_headers):
    make_product(db, "Arroz", "32.90", 10, codigo="ABR-001")

    response = client.post(BASE, json={
        "nombre": "Arroz integral",
        "codigo": "abr-001",
        "precio": "40"
    }, headers=admin_headers)

    assert response.status_code == 400


def test_negative_price_is_invalid(client, admin_headers):
    response = client.post(BASE, json={"nombre": "X", "precio": "-1"}, headers=admin_headers)

    assert response.status_code == 422


def test_vendedor_can_list_but_not_create(client, db, vendedor_headers):
    make_product(db, "Galletas", "35.50", 3, codigo="GAL-002")

    listed = client.get(BASE, headers=vendedor_headers)
    created = client.post(BASE, json={"nombre": "Y", "precio": "1"}, headers=vendedor_headers)

    assert listed.status_code == 200
    assert [p["nombre"] for p in listed.json()] == ["Galletas"]
    assert created.status_code == 403


def test_list_filters(client, db, admin_headers):
    make_product(db, "Agua Mineral", "12.50", 0, codigo="BEB-001")
    make_product(db, "Refresco", "18", 4, codigo="BEB-002")
    make_product(db, "Descontinuado", "5", 4, is_active=False)

    def names(**params):
        return [p["nombre"] for p in client.get(BASE, params=params, headers=admin_headers).json()]

    assert names() == ["Agua Mineral", "Refresco"]
    assert names(con_stock=True) == ["Refresco"]
    assert names(q="beb-002") == ["Refresco"]
    assert names(solo_activos=False) == ["Agua Mineral", "Descontinuado", "Refresco"]


def test_update_and_deactivate(client, db, admin_headers):
    producto = make_product(db, "Jabón", "14", 0, codigo="LIM-001")

    updated = client.put(f"{BASE}/{producto.id}", json={"stock": 20, "precio": "15.00"}, headers=admin_headers)
    assert updated.status_code == 200
    assert updated.json()["stock"] == 20

    removed = client.delete(f"{BASE}/{producto.id}", headers=admin_headers)
    assert removed.status_code == 200
    assert removed.json()["is_active"] is False

    assert client.get(BASE, headers=admin_headers).json() == []


def test_update_with_empty_name(client, db, admin_headers):
    producto = make_product(db, "Jabón", "14", 1)

    response = client.put(f"{BASE}/{producto.id}", json={"nombre": "   "}, headers=admin_headers)

    assert response.status_code == 400


def test_missing_product(client, admin_headers):
    assert client.get(f"{BASE}/999", headers=admin_headers).status_code == 404
    assert client.put(f"{BASE}/999", json={"stock": 1}, headers=admin_headers).status_code == 404
