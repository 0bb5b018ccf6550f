#!/usr/bin/env python3
"""Launch the Vehicle Locator API with uvicorn.

Honors PORT and HOST (platform conventions) plus VL_LOG_LEVEL; ``--reload``
turns on auto-reload for local development.
"""

import os
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent / "src"
APP_PATH = "vehicle_locator.main:app"


def _port_from_env(default: int = 8000) -> int:
    raw = os.environ.get("PORT", str(default))
    try:
        return int(raw)
    except ValueError:
        print(f"Warning: Invalid PORT value '{raw}', using default {default}", file=sys.stderr)
        return default


def main() -> int:
    if SRC_DIR.is_dir():
        sys.path.insert(0, str(SRC_DIR))
        existing = os.environ.get("PYTHONPATH")
        os.environ["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), existing]))
    else:
        print(f"Warning: src directory not found at {SRC_DIR}", file=sys.stderr)

    try:
        import uvicorn
    except ImportError:
        print("❌ uvicorn is not installed; run `pip install -e .` first", file=sys.stderr)
        return 1

    host = os.environ.get("HOST", "0.0.0.0")
    port = _port_from_env()
    reload = "--reload" in sys.argv[1:]
    log_level = os.environ.get("VL_LOG_LEVEL", "info").lower()

    print(f"🚀 Serving {APP_PATH} on {host}:{port} (reload={'on' if reload else 'off'})", file=sys.stderr)
    try:
        uvicorn.run(
            APP_PATH,
            host=host,
            port=port,
            reload=reload,
            reload_dirs=[str(SRC_DIR)] if reload else None,
            log_level=log_level,
            proxy_headers=True,
            forwarded_allow_ips="*",
        )
    except KeyboardInterrupt:
        print("⚠️ Server interrupted by user", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
