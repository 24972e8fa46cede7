#!/usr/bin/env python3
"""
Start the coupon generator API: apply migrations, then run uvicorn.
"""
import sys
import os
import socket
import time
import traceback
from pathlib import Path

# Add the backend directory to the Python path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

os.chdir(backend_dir)


def is_port_in_use(host, port):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError:
            return True


def run_migrations():
    try:
        from scripts.init_db import init_db
        init_db()
    except Exception as e:
        print(f"Warning: Migrations failed (server will still start): {e}", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)


if __name__ == "__main__":
    import uvicorn
    from giftcoupons.core.config import settings

    # Retry a few times (e.g. previous instance still shutting down)
    for attempt in range(3):
        if not is_port_in_use(settings.HOST, settings.PORT):
            break
        print(f"Port {settings.PORT} is in use. Retrying in 3s ({attempt + 1}/3)...", file=sys.stderr)
        time.sleep(3)
    else:
        print(f"ERROR: Port {settings.PORT} is still in use after retries. Another instance may be running.", file=sys.stderr)
        sys.exit(1)

    run_migrations()

    try:
        uvicorn.run(
            "giftcoupons.main:app",
            host=settings.HOST,
            port=settings.PORT,
            log_level="debug" if settings.DEBUG else "info",
            access_log=True,
            reload=False,
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")
        sys.exit(0)
