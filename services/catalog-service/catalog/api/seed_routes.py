# services/catalog-service/catalog/api/seed_routes.py
from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.responses import ORJSONResponse

from ..db.mongodb import MongoGateway, get_gateway
from ..seeds.seed_catalog import describe_seed_failure, seed_catalog

log = logging.getLogger("catalog.api.seed")

router = APIRouter(prefix="/api/seed", tags=["admin"])


@router.post("")
async def populate_catalog(gateway: MongoGateway = Depends(get_gateway)):
    """
    Clears and repopulates writers and publications with the sample data set.
    """
    log.info("Initiating catalog population")
    try:
        db = await gateway.get_db()
        stats = await seed_catalog(db)
    except Exception as exc:
        log.error("Catalog population failed", exc_info=True)
        return ORJSONResponse(
            {
                "success": False,
                "error": describe_seed_failure(exc),
                "technicalDetails": str(exc) or "Unknown error occurred",
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return {
        "success": True,
        "message": "Catalog population completed successfully!",
        "statistics": stats.model_dump(by_alias=True),
    }


@router.get("")
async def population_usage() -> Dict[str, Any]:
    return {
        "message": "Catalog population service. Send POST request to populate database.",
        "instructions": "Use POST method to this endpoint to fill the database with sample catalog data.",
    }
