from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, ForeignKey, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.config.database import Base

class TimestampMixin:
    """Mixin para timestamps automáticos"""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

# ===== USUARIOS =====

class Usuario(Base, TimestampMixin):
    """Modelo de Usuario (administrador o vendedor)"""
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    nombre = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    rol = Column(String(20), default='vendedor', nullable=False)
    avatar = Column(String(10))
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    ventas = relationship("Venta", back_populates="vendedor")

    @property
    def is_admin(self):
        return self.rol == "admin"

# ===== PRODUCTOS =====

class Producto(Base, TimestampMixin):
    """Modelo de Producto del catálogo"""
    __tablename__ = "productos"

    id = Column(Integer, primary_key=True, index=True)
    codigo = Column(String(100), unique=True, index=True)
    nombre = Column(String(255), nullable=False, index=True)
    descripcion = Column(Text)
    precio = Column(Numeric(10, 2), nullable=False, default=0)
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False)

# ===== VENTAS =====

class Venta(Base):
    """Modelo de Venta registrada desde el punto de venta"""
    __tablename__ = "ventas"

    id = Column(Integer, primary_key=True, index=True)
    vendedor_id = Column(Integer, ForeignKey("usuarios.id"), nullable=False, index=True)
    subtotal = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    pago_recibido = Column(Numeric(10, 2), nullable=False)
    cambio = Column(Numeric(10, 2), nullable=False, default=0)
    fecha = Column(DateTime, server_default=func.current_timestamp(), index=True)

    # Relationships
    vendedor = relationship("Usuario", back_populates="ventas")
    items = relationship("VentaItem", back_populates="venta", cascade="all, delete-orphan")

class VentaItem(Base):
    """Modelo de Item de Venta"""
    __tablename__ = "venta_items"

    id = Column(Integer, primary_key=True, index=True)
    venta_id = Column(Integer, ForeignKey("ventas.id"), nullable=False, index=True)
    producto_id = Column(Integer, ForeignKey("productos.id"), nullable=False)
    nombre = Column(String(255), nullable=False)
    precio = Column(Numeric(10, 2), nullable=False)
    cantidad = Column(Integer, nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)

    # Relationships
    venta = relationship("Venta", back_populates="items")
    producto = relationship("Producto")
