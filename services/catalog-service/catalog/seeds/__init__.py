# services/catalog-service/catalog/seeds/__init__.py
from .seed_catalog import SEED_PUBLICATIONS, SEED_WRITERS, describe_seed_failure, seed_catalog

__all__ = ["SEED_PUBLICATIONS", "SEED_WRITERS", "describe_seed_failure", "seed_catalog"]
