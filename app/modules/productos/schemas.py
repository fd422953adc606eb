from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

class ProductosBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={
            Decimal: float,
            datetime: lambda v: v.isoformat(),
        }
    )

# ==================== REQUEST SCHEMAS ====================

class ProductoCreate(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=255, description="Nombre del producto")
    codigo: Optional[str] = Field(None, max_length=100, description="Código / SKU")
    descripcion: Optional[str] = Field(None, description="Descripción")
    precio: Decimal = Field(..., ge=0, description="Precio de venta")
    stock: int = Field(0, ge=0, description="Cantidad en stock")

    @field_validator('nombre')
    @classmethod
    def validate_nombre(cls, v: str):
        if not v or not v.strip():
            raise ValueError('El nombre no puede estar vacío')
        return v.strip()

    @field_validator('codigo')
    @classmethod
    def normalize_codigo(cls, v: Optional[str]):
        if v is None:
            return None
        v = v.strip().upper()
        return v or None

class ProductoUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1, max_length=255)
    codigo: Optional[str] = Field(None, max_length=100)
    descripcion: Optional[str] = None
    precio: Optional[Decimal] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    @field_validator('codigo')
    @classmethod
    def normalize_codigo(cls, v: Optional[str]):
        if v is None:
            return None
        v = v.strip().upper()
        return v or None

# ==================== RESPONSE SCHEMAS ====================

class ProductoResponse(ProductosBaseModel):
    id: int
    codigo: Optional[str]
    nombre: str
    descripcion: Optional[str]
    precio: Decimal
    stock: int
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
