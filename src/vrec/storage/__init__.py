# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Recording storage.

- Local filesystem backend (default)
- S3-compatible object storage backend (boto3), used when credentials are set
- A selector fixed at startup that routes deletes by reference shape
"""
