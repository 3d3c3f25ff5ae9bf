# services/catalog-service/catalog/api/__init__.py
from .graphql_routes import router as graphql_router
from .health_routes import router as health_router
from .seed_routes import router as seed_router

__all__ = ["graphql_router", "health_router", "seed_router"]
