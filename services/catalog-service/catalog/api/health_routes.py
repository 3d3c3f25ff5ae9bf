# services/catalog-service/catalog/api/health_routes.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter

from ..config import settings

router = APIRouter(tags=["meta"])


@router.get("/", summary="Root metadata")
def root() -> Dict[str, Any]:
    return {
        "service": settings.service_name,
        "status": "ok",
        "message": "publication catalog service",
        "graphql": "/api/graphql",
        "seed": "/api/seed",
        "health": "/health",
    }


@router.get("/health", summary="Liveness probe")
def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "service": settings.service_name,
        "at": datetime.now(timezone.utc).isoformat(),
    }
