# Routes module
from .jobs import router as jobs_router
from .articles import router as articles_router
from .settings import router as settings_router

__all__ = ["jobs_router", "articles_router", "settings_router"]
