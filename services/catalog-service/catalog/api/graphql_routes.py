# services/catalog-service/catalog/api/graphql_routes.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import ORJSONResponse
from graphql import GraphQLError
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import CatalogError
from ..db.mongodb import get_db
from ..services.catalog_service import CatalogService
from .graphql_schema import schema

log = logging.getLogger("catalog.api.graphql")

router = APIRouter(tags=["graphql"])

GRAPHQL_PATH = "/api/graphql"


class GraphQLRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str
    variables: Optional[Dict[str, Any]] = None
    operation_name: Optional[str] = Field(default=None, alias="operationName")


def get_catalog_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def format_error(err: GraphQLError) -> Dict[str, Any]:
    formatted = dict(err.formatted)
    original = err.original_error
    if isinstance(original, CatalogError):
        extensions = dict(formatted.get("extensions") or {})
        extensions["code"] = original.code
        formatted["extensions"] = extensions
    return formatted


@router.post(GRAPHQL_PATH)
async def execute_graphql(
    body: GraphQLRequest,
    svc: CatalogService = Depends(get_catalog_service),
):
    result = await schema.execute(
        body.query,
        variable_values=body.variables,
        operation_name=body.operation_name,
        context_value={"catalog_service": svc},
    )
    payload: Dict[str, Any] = {"data": result.data}
    if result.errors:
        payload["errors"] = [format_error(e) for e in result.errors]
    # parse/validation failures never reach a resolver, so they carry no path
    rejected = bool(result.errors) and all(e.path is None for e in result.errors)
    status_code = 400 if result.data is None and rejected else 200
    return ORJSONResponse(payload, status_code=status_code)


@router.get(GRAPHQL_PATH)
async def graphql_usage() -> Dict[str, Any]:
    return {
        "message": "Catalog GraphQL endpoint. Send a POST request with a JSON body.",
        "body": {"query": "query { fetchAllPublications { id bookTitle } }", "variables": {}},
        "queries": [
            "fetchAllPublications",
            "retrievePublicationInfo",
            "findPublicationsByCategory",
            "fetchAllWriters",
            "retrieveAllCategories",
        ],
        "mutations": ["createPublication", "modifyPublication"],
    }
