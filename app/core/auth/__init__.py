"""
Autenticación y control de acceso por rol.

- security.py: hashing de contraseñas y tokens JWT
- service.py: login y registro
- dependencies.py: dependencias FastAPI (usuario actual, roles)
"""

from .dependencies import get_current_user, require_roles
from .service import AuthService

__all__ = [
    "get_current_user",
    "require_roles",
    "AuthService"
]
