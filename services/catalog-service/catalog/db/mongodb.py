# services/catalog-service/catalog/db/mongodb.py
from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Callable, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import OperationFailure, PyMongoError

from catalog.config import settings
from catalog.core.errors import ConnectionFailureCause, DatabaseConnectionFailure

log = logging.getLogger("catalog.db")

_CREDENTIALS = re.compile(r"//([^:/@]+):([^@]+)@")

_HOST_MARKERS = (
    "ENOTFOUND",
    "Name or service not known",
    "nodename nor servname",
    "getaddrinfo failed",
    "Temporary failure in name resolution",
    "DNS",
)
_REFUSED_MARKERS = ("ECONNREFUSED", "Connection refused", "actively refused")
_TLS_MARKERS = ("SSL", "TLS", "certificate")


def redact_uri(uri: str) -> str:
    return _CREDENTIALS.sub("//***:***@", uri)


def classify_connection_error(exc: BaseException) -> DatabaseConnectionFailure:
    """
    Map a low-level driver failure onto a user-facing connection failure.
    """
    message = str(exc)
    if any(m in message for m in _HOST_MARKERS):
        cause = ConnectionFailureCause.HOST_RESOLUTION
    elif (isinstance(exc, OperationFailure) and exc.code == 18) or "authentication failed" in message.lower():
        cause = ConnectionFailureCause.AUTHENTICATION
    elif any(m in message for m in _REFUSED_MARKERS):
        cause = ConnectionFailureCause.REFUSED
    elif any(m in message for m in _TLS_MARKERS):
        cause = ConnectionFailureCause.TLS
    else:
        cause = ConnectionFailureCause.UNKNOWN
    return DatabaseConnectionFailure(cause, detail=message)


class MongoGateway:
    """
    Lazily connects once and caches the (client, database) pair for the life of
    the process. Build one per process; FastAPI reaches it via `get_gateway`.
    """

    def __init__(
        self,
        uri: str,
        db_name: str,
        *,
        connect_timeout_ms: int = 10_000,
        server_selection_timeout_ms: int = 10_000,
        socket_timeout_ms: int = 45_000,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
    ) -> None:
        self.uri = uri
        self.db_name = db_name
        self._client_kwargs = {
            "connectTimeoutMS": connect_timeout_ms,
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "socketTimeoutMS": socket_timeout_ms,
        }
        self._client_factory = client_factory
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, s=settings) -> "MongoGateway":
        return cls(
            s.mongo_uri,
            s.mongo_db,
            connect_timeout_ms=s.mongo_connect_timeout_ms,
            server_selection_timeout_ms=s.mongo_server_selection_timeout_ms,
            socket_timeout_ms=s.mongo_socket_timeout_ms,
        )

    @property
    def is_connected(self) -> bool:
        return self._client is not None and self._db is not None

    async def connect(self) -> Tuple[AsyncIOMotorClient, AsyncIOMotorDatabase]:
        if self._client is not None and self._db is not None:
            return self._client, self._db

        async with self._lock:
            if self._client is not None and self._db is not None:
                return self._client, self._db

            log.info("Initializing database connection to %s", redact_uri(self.uri))
            client = None
            try:
                client = self._client_factory(self.uri, **self._client_kwargs)
                db = client[self.db_name]
                await db.command("ping")
            except PyMongoError as exc:
                log.error("Database connection failed: %s", exc)
                if client is not None:
                    client.close()
                raise classify_connection_error(exc) from exc

            self._client, self._db = client, db
            log.info("Database connection established (db=%s)", self.db_name)
            return client, db

    async def get_db(self) -> AsyncIOMotorDatabase:
        _, db = await self.connect()
        return db

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None


gateway = MongoGateway.from_settings()


def get_gateway() -> MongoGateway:
    return gateway


async def get_db() -> AsyncIOMotorDatabase:
    return await gateway.get_db()
