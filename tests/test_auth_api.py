from datetime import timedelta

from app.config.settings import settings
from app.core.auth.security import (
    create_access_token, decode_access_token, hash_password, verify_password
)

from .conftest import auth_headers, make_user


def test_password_hashing():
    hashed = hash_password("secreto123")

    assert hashed != "secreto123"
    assert verify_password("secreto123", hashed)
    assert not verify_password("otra", hashed)
    assert not verify_password("secreto123", "no-es-un-hash")


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "1", "rol": "admin"}, expires_delta=timedelta(seconds=-1))

    assert decode_access_token(token) is None


def test_login_success(client, admin):
    response = client.post("/api/v1/auth/login", json={
        "email": "Admin@Tienda.com ",
        "password": "admin123"
    })

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["rol"] == "admin"
    assert data["expires_in"] == settings.access_token_expire_minutes * 60
    assert decode_access_token(data["access_token"])["sub"] == str(admin.id)


def test_login_remember_extends_token(client, vendedor):
    response = client.post("/api/v1/auth/login", json={
        "email": "vendedor@tienda.com",
        "password": "vendedor123",
        "remember": True
    })

    assert response.status_code == 200
    assert response.json()["expires_in"] == settings.remember_token_expire_days * 86400


def test_login_wrong_password(client, admin):
    response = client.post("/api/v1/auth/login", json={
        "email": "admin@tienda.com",
        "password": "incorrecta"
    })

    assert response.status_code == 401
    assert response.json()["detail"] == "Credenciales inválidas"


def test_login_inactive_user(client, db):
    make_user(db, "baja@tienda.com", "vendedor", password="secreto123", is_active=False)

    response = client.post("/api/v1/auth/login", json={
        "email": "baja@tienda.com",
        "password": "secreto123"
    })

    assert response.status_code == 401


def test_register_creates_vendedor(client):
    response = client.post("/api/v1/auth/register", json={
        "nombre": "Nuevo Vendedor",
        "email": "nuevo@tienda.com",
        "password": "secreto123"
    })

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["rol"] == "vendedor"
    assert user["avatar"] == "N"


def test_register_duplicate_email(client, vendedor):
    response = client.post("/api/v1/auth/register", json={
        "nombre": "Otro",
        "email": "vendedor@tienda.com",
        "password": "secreto123"
    })

    assert response.status_code == 400


def test_register_short_password(client):
    response = client.post("/api/v1/auth/register", json={
        "nombre": "Corto",
        "email": "corto@tienda.com",
        "password": "123"
    })

    assert response.status_code == 422


def test_me_and_logout(client, vendedor, vendedor_headers):
    me = client.get("/api/v1/auth/me", headers=vendedor_headers)
    assert me.status_code == 200
    assert me.json()["email"] == "vendedor@tienda.com"

    logout = client.post("/api/v1/auth/logout", headers=vendedor_headers)
    assert logout.status_code == 200
    assert logout.json()["success"] is True


def test_invalid_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer basura"})

    assert response.status_code == 401


def test_token_for_deactivated_user(client, db):
    user = make_user(db, "temporal@tienda.com", "vendedor")
    headers = auth_headers(user)
    user.is_active = False
    db.commit()

    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401
