#!/usr/bin/env python3
"""Helper script to check and create the .env file for geocoding and database settings."""

import sys
from pathlib import Path

ENV_TEMPLATE = """# Geocoding (Optional - without a key only the fallback ZIP table is used)
VL_GOOGLE_MAPS_API_KEY=your-google-maps-api-key
# VL_GEOCODING_TIMEOUT_SECONDS=12
# VL_GEOCODE_CACHE_TTL_HOURS=24

# Supabase (Optional - without credentials a generated mock inventory is served)
VL_SUPABASE_URL=https://your-project-id.supabase.co
VL_SUPABASE_KEY=your-service-role-key-here

# API Configuration
VL_API_PREFIX=/api
# VL_FRONTEND_ALLOWED_ORIGINS - JSON array or comma-separated list
# VL_LOG_LEVEL=INFO
"""


def _mask(value: str, head: int = 12) -> str:
    if len(value) <= head:
        return "*" * len(value)
    return value[:head] + "..."


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Vehicle Locator Environment Checker")
    print("=" * 60)
    print()

    if not env_file.exists():
        print(f"❌ .env file NOT found at: {env_file}")
        env_file.write_text(ENV_TEMPLATE, encoding="utf-8")
        print(f"✅ Created template .env file at: {env_file}")
        print()
        print("⚠️  Edit .env to add your Google Maps key and Supabase credentials.")
        return

    print(f"✅ Found .env file at: {env_file}")
    print()

    try:
        sys.path.insert(0, str(project_root / "src"))
        from vehicle_locator.config import settings
    except Exception as e:
        print(f"❌ Error loading config: {e}")
        print("Make sure you're running this from the project root directory")
        return

    if settings.google_maps_api_key:
        print(f"✅ Google Maps API key: {_mask(settings.google_maps_api_key)}")
    else:
        print("⚠️  Google Maps API key missing - geocoding runs in fallback-only mode")

    if settings.supabase_url and settings.supabase_key:
        print(f"✅ Supabase URL: {settings.supabase_url[:30]}...")
        print(f"✅ Supabase key: {_mask(settings.supabase_key)}")
        if "--print-sql" in sys.argv:
            from vehicle_locator.db import load_sql

            print()
            print("-- Run once in the Supabase SQL editor:")
            print(load_sql("sync_seller_coordinates"))
        else:
            print("ℹ️  Run with --print-sql to show the sync_seller_coordinates function to install")
    else:
        print("⚠️  Supabase NOT configured - the API will serve mock inventory")
        print()
        print("Troubleshooting:")
        print("1. Make sure variables start with the VL_ prefix")
        print("2. Make sure there are no spaces around = sign")
        print("3. Restart the backend after editing .env")


if __name__ == "__main__":
    main()
