from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    admin = "admin"
    vendedor = "vendedor"

class LoginRequest(BaseModel):
    email: str = Field(..., description="Correo electrónico")
    password: str = Field(..., min_length=1, description="Contraseña")
    remember: bool = Field(False, description="Mantener la sesión iniciada")

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v: str):
        v = v.strip().lower()
        if not v or '@' not in v:
            raise ValueError('Correo electrónico inválido')
        return v

class RegisterRequest(LoginRequest):
    nombre: str = Field(..., min_length=2, description="Nombre completo")
    password: str = Field(..., min_length=6, description="Contraseña (mínimo 6 caracteres)")

class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nombre: str
    email: str
    rol: UserRole
    avatar: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

class TokenResponse(BaseModel):
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Vigencia del token en segundos")
    user: UserResponse
