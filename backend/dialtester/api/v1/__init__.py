# API package
from dialtester.api.v1.sessions import router as sessions_router
from dialtester.api.v1.data_points import router as data_points_router
from dialtester.api.v1.admin import router as admin_router
from dialtester.api.v1.export import router as export_router
from dialtester.api.v1.websocket import router as websocket_router

__all__ = [
    "sessions_router",
    "data_points_router",
    "admin_router",
    "export_router",
    "websocket_router",
]
