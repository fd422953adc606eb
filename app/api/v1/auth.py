# app/api/v1/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.core.auth.dependencies import get_current_user
from app.core.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from app.core.auth.service import AuthService
from app.shared.database.models import Usuario

router = APIRouter()

@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Iniciar sesión con correo y contraseña.

    Con `remember=true` el token dura `remember_token_expire_days` días.
    """
    service = AuthService(db)
    return service.login(credentials)

@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    data: RegisterRequest,
    db: Session = Depends(get_db)
):
    """Crear una cuenta de vendedor e iniciar sesión"""
    service = AuthService(db)
    return service.register(data)

@router.get("/me", response_model=UserResponse)
async def read_current_user(
    current_user: Usuario = Depends(get_current_user)
):
    return current_user

@router.post("/logout")
async def logout(
    current_user: Usuario = Depends(get_current_user)
):
    # Tokens sin estado: el cliente descarta el token
    return {
        "success": True,
        "message": f"Sesión cerrada para {current_user.email}"
    }
