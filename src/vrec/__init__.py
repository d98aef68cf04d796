# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""vrec: voice recording service (auth, uploads, recording registry)."""

__version__ = "0.1.0"
