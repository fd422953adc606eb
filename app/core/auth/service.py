# app/core/auth/service.py
import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.shared.database.models import Usuario
from .schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse, UserRole
from .security import create_access_token, hash_password, token_lifetime, verify_password

logger = logging.getLogger(__name__)

class AuthService:
    """
    Servicio de autenticación: login, registro y emisión de tokens
    """

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[Usuario]:
        return self.db.query(Usuario).filter(Usuario.email == email.lower()).first()

    def authenticate(self, email: str, password: str) -> Optional[Usuario]:
        user = self.get_user_by_email(email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    def login(self, credentials: LoginRequest) -> TokenResponse:
        user = self.authenticate(credentials.email, credentials.password)
        if not user:
            logger.warning(f"Intento de login fallido para {credentials.email}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Credenciales inválidas",
                headers={"WWW-Authenticate": "Bearer"}
            )

        logger.info(f"Login exitoso: {user.email} ({user.rol})")
        return self.issue_token(user, remember=credentials.remember)

    def register(self, data: RegisterRequest) -> TokenResponse:
        """
        Registrar una cuenta nueva de vendedor.
        Las cuentas de administrador solo se crean con los scripts de mantenimiento.
        """
        if self.get_user_by_email(data.email):
            raise HTTPException(status_code=400, detail="El correo ya está registrado")

        user = Usuario(
            nombre=data.nombre.strip(),
            email=data.email,
            password_hash=hash_password(data.password),
            rol=UserRole.vendedor.value,
            avatar=data.nombre.strip()[:1].upper(),
            is_active=True
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Usuario registrado: {user.email}")
        return self.issue_token(user, remember=data.remember)

    def issue_token(self, user: Usuario, remember: bool = False) -> TokenResponse:
        lifetime = token_lifetime(remember)
        token = create_access_token(
            {"sub": str(user.id), "rol": user.rol},
            expires_delta=lifetime
        )
        return TokenResponse(
            access_token=token,
            expires_in=int(lifetime.total_seconds()),
            user=UserResponse.model_validate(user)
        )
