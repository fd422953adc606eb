# app/core/auth/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config.settings import settings

# pbkdf2_sha256 para hashes nuevos; bcrypt solo para verificar hashes heredados
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256", "bcrypt"],
    default="pbkdf2_sha256",
    deprecated="auto"
)

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        # Hash con formato desconocido
        return False

def token_lifetime(remember: bool = False) -> timedelta:
    if remember:
        return timedelta(days=settings.remember_token_expire_days)
    return timedelta(minutes=settings.access_token_expire_minutes)

def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Crear JWT firmado con la clave de la aplicación.

    `data` debe incluir `sub` (id del usuario como string) y `rol`.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or token_lifetime())
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Devuelve el payload del token o None si es inválido o expiró"""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
