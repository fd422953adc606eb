# app/core/navigation.py
"""
Visibilidad de módulos (menú lateral) según el rol del usuario.

El administrador ve todos los módulos; el vendedor solo el punto de venta
y el catálogo de productos.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel

class ModuleInfo(BaseModel):
    id: str
    label: str
    title: str
    roles: List[str]

ALL_MODULES: List[ModuleInfo] = [
    ModuleInfo(
        id="ventas",
        label="Punto de Venta",
        title="Punto de Venta",
        roles=["admin", "vendedor"]
    ),
    ModuleInfo(
        id="productos",
        label="Productos",
        title="Gestión de Productos",
        roles=["admin", "vendedor"]
    ),
    ModuleInfo(
        id="reportes",
        label="Reportes",
        title="Reportes y Estadísticas",
        roles=["admin"]
    ),
    ModuleInfo(
        id="database",
        label="Base de Datos",
        title="Base de Datos",
        roles=["admin"]
    ),
]

_MODULES_BY_ID: Dict[str, ModuleInfo] = {module.id: module for module in ALL_MODULES}

def get_module(module_id: str) -> Optional[ModuleInfo]:
    return _MODULES_BY_ID.get(module_id)

def get_available_modules(rol: str) -> List[ModuleInfo]:
    """Módulos visibles para el rol, en el orden del menú"""
    return [module for module in ALL_MODULES if rol in module.roles]

def can_access(rol: str, module_id: str) -> bool:
    module = get_module(module_id)
    return module is not None and rol in module.roles

def initial_module(rol: str) -> str:
    # Vendedor empieza en ventas; admin en reportes
    return "ventas" if rol == "vendedor" else "reportes"

def theme_for(rol: str) -> str:
    return rol
