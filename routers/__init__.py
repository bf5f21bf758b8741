# routers/__init__.py
from .developments import router as developments_router
from .parameters import router as parameters_router
from .units import router as units_router

__all__ = [
     "developments_router",
     "parameters_router",
     "units_router",
]
