# services/catalog-service/catalog/main.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import ORJSONResponse
from pymongo.errors import PyMongoError

from catalog.api import graphql_routes, health_routes, seed_routes
from catalog.config import settings
from catalog.core.errors import DatabaseConnectionFailure
from catalog.dal.publication_dal import ensure_indexes
from catalog.db.mongodb import gateway
from catalog.infra.logging import setup_logging
from catalog.seeds.seed_catalog import seed_catalog

logger = logging.getLogger("catalog.main")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    App lifespan:
      - configure logging
      - warm the Mongo connection and ensure indexes (non-fatal: requests
        reconnect lazily and report the failure themselves)
      - optional seeding (SEED_ON_START=true)
      - close the Mongo client on shutdown
    """
    setup_logging(settings.service_name)
    logger.info("%s starting up", settings.service_name)

    try:
        db = await gateway.get_db()
        await ensure_indexes(db)
        logger.info("Mongo indexes ensured (db=%s)", settings.mongo_db)
        if settings.seed_on_start:
            await seed_catalog(db)
            logger.info("Seeds executed (SEED_ON_START=true).")
    except DatabaseConnectionFailure as exc:
        logger.warning("Mongo unavailable at startup: %s", exc)
    except PyMongoError:
        logger.warning("Could not ensure Mongo indexes", exc_info=True)

    try:
        yield
    finally:
        await gateway.close()
        logger.info("%s shutdown complete", settings.service_name)


app = FastAPI(
    title="Publication Catalog Service",
    description="GraphQL catalog of publications and writers over MongoDB",
    version="0.1.0",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)


@app.exception_handler(DatabaseConnectionFailure)
async def database_unavailable(request: Request, exc: DatabaseConnectionFailure) -> ORJSONResponse:
    return ORJSONResponse(
        {"detail": exc.message, "cause": exc.cause.value},
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


app.include_router(health_routes.router)
app.include_router(graphql_routes.router)
app.include_router(seed_routes.router)
