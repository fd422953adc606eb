import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import Base, get_db
from app.core.auth.security import create_access_token, hash_password
from app.main import app
from app.modules.ventas import PosSessionRegistry
from app.shared.database.models import Producto, Usuario

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.state.pos_sessions = PosSessionRegistry()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db, email, rol, password="secreto123", nombre=None, is_active=True):
    user = Usuario(
        nombre=nombre or email.split("@")[0].title(),
        email=email,
        password_hash=hash_password(password),
        rol=rol,
        is_active=is_active
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_product(db, nombre, precio, stock, codigo=None, is_active=True):
    producto = Producto(
        nombre=nombre,
        precio=Decimal(str(precio)),
        stock=stock,
        codigo=codigo,
        is_active=is_active
    )
    db.add(producto)
    db.commit()
    db.refresh(producto)
    return producto


def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "rol": user.rol})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(db):
    return make_user(db, "admin@tienda.com", "admin", password="admin123", nombre="Administrador")


@pytest.fixture
def vendedor(db):
    return make_user(db, "vendedor@tienda.com", "vendedor", password="vendedor123", nombre="Vendedor")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def vendedor_headers(vendedor):
    return auth_headers(vendedor)
