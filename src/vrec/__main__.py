# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""vrec entrypoint.

Run with:
  python -m vrec

The app itself is built by ``vrec.app:create_app`` from ``VREC_*`` settings;
only the server binding is read here.
"""

import os
import uvicorn

_TRUTHY = {"1", "true", "yes", "y"}


def server_options() -> dict:
    return {
        "host": os.getenv("VREC_HOST", "0.0.0.0"),
        "port": int(os.getenv("VREC_PORT", "8000")),
        "reload": os.getenv("VREC_RELOAD", "false").strip().lower() in _TRUTHY,
        "log_level": os.getenv("VREC_LOG_LEVEL", "INFO").strip().lower(),
        # Uploads arrive through a reverse proxy on hosted deployments.
        "proxy_headers": True,
        "forwarded_allow_ips": os.getenv("VREC_FORWARDED_ALLOW_IPS", "127.0.0.1"),
    }


def main() -> None:
    uvicorn.run("vrec.app:create_app", factory=True, **server_options())

if __name__ == "__main__":
    main()
