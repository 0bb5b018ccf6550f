"""Database clients and bundled SQL."""

from .supabase import create_supabase_client, get_supabase_client, load_sql

__all__ = ["create_supabase_client", "get_supabase_client", "load_sql"]
