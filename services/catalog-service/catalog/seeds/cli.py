# services/catalog-service/catalog/seeds/cli.py
"""Standalone catalog reseed, runnable outside the API process."""
from __future__ import annotations

import asyncio
import logging

import typer

from catalog.config import settings
from catalog.db.mongodb import MongoGateway, redact_uri
from catalog.infra.logging import setup_logging
from catalog.models.catalog import SeedStatistics
from catalog.seeds.seed_catalog import describe_seed_failure, seed_catalog

log = logging.getLogger("catalog.seeds.cli")

app = typer.Typer(help="Clear the catalog database and load the sample writers and publications")


async def _run_seed(gateway: MongoGateway) -> SeedStatistics:
    try:
        db = await gateway.get_db()
        log.info("Successfully connected to catalog database")
        return await seed_catalog(db)
    finally:
        await gateway.close()
        log.info("Database connection terminated.")


@app.command()
def run(
    mongo_uri: str = typer.Option(settings.mongo_uri, help="MongoDB connection string"),
    db_name: str = typer.Option(settings.mongo_db, help="Catalog database name"),
) -> None:
    setup_logging(f"{settings.service_name}-seed")
    log.info("Establishing connection: %s", redact_uri(mongo_uri))

    gateway = MongoGateway(
        mongo_uri,
        db_name,
        connect_timeout_ms=settings.mongo_connect_timeout_ms,
        server_selection_timeout_ms=settings.mongo_server_selection_timeout_ms,
        socket_timeout_ms=settings.mongo_socket_timeout_ms,
    )
    try:
        stats = asyncio.run(_run_seed(gateway))
    except Exception as exc:
        log.error("Catalog population failed: %s", describe_seed_failure(exc), exc_info=True)
        raise typer.Exit(code=1)

    typer.secho(
        f"Catalog population completed: {stats.writers_created} writers, "
        f"{stats.publications_added} publications "
        f"({', '.join(stats.categories_available)})",
        fg=typer.colors.GREEN,
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
