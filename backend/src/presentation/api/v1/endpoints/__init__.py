"""
API V1 Endpoints Package
Exports routers used by main app
"""
from .applications import router as applications_router
from .interviews import router as interviews_router
from .conversations import router as conversations_router

__all__ = [
    "applications_router",
    "interviews_router",
    "conversations_router"
]
