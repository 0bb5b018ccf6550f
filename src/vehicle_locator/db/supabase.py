"""Supabase access for the vehicle and seller tables."""

import logging
from functools import lru_cache
from importlib import resources

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


def create_supabase_client(url: str | None, key: str | None) -> Client | None:
    """Build a client for ``url``/``key``, or None when either is missing or rejected.

    No query is issued here; an unreachable project only shows up on first use.
    """
    if not url or not key:
        logger.info("Supabase credentials not configured (missing URL or key), using mock inventory")
        return None

    try:
        return create_client(url, key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client for {url}: {e}")
        return None


@lru_cache()
def get_supabase_client() -> Client | None:
    return create_supabase_client(settings.supabase_url, settings.supabase_key)


def load_sql(name: str) -> str:
    """Text of a bundled SQL script, e.g. ``load_sql("sync_seller_coordinates")``.

    The scripts create the database objects the Supabase store relies on and are
    applied once through the Supabase SQL editor or ``psql``.
    """
    return resources.files(__package__).joinpath("sql", f"{name}.sql").read_text(encoding="utf-8")
