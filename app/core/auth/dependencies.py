# app/core/auth/dependencies.py
from typing import Callable, List, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.shared.database.models import Usuario
from .security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)

def _unauthorized(detail: str = "No autenticado") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Usuario:
    """Usuario autenticado a partir del token Bearer"""
    if credentials is None:
        raise _unauthorized()

    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        raise _unauthorized("Token inválido o expirado")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise _unauthorized("Token inválido o expirado")

    user = db.query(Usuario).filter(Usuario.id == user_id).first()
    if not user or not user.is_active:
        raise _unauthorized("Usuario no encontrado o inactivo")

    return user

def require_roles(roles: List[str]) -> Callable[..., Usuario]:
    """Dependencia que restringe el endpoint a los roles indicados"""

    def role_checker(current_user: Usuario = Depends(get_current_user)) -> Usuario:
        if current_user.rol not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Acceso denegado para el rol '{current_user.rol}'"
            )
        return current_user

    return role_checker
