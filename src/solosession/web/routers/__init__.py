from solosession.web.routers.auth import router as auth_router
from solosession.web.routers.data import router as data_router
from solosession.web.routers.pages import router as pages_router

__all__ = [
    "auth_router",
    "data_router",
    "pages_router",
]
