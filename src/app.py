"""Storefront FastAPI application.

Processes every command synchronously inside the storefront domain context
and wraps each response in the standard envelope.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from storefront.domain import storefront
from storefront.utils.logging import configure_logging

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the domain.toml overlay (memory by default, PostgreSQL
# in staging and production).
configure_logging()
storefront.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
from storefront.web.application import create_app  # noqa: E402

app = create_app()
