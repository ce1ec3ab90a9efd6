"""
Settings and document store construction.

Configuration is read from the environment, after loading the project's .env
file. Only build_document_store() touches the Supabase client, so importing this
module never requires credentials.

Environment variables:
- SUPABASE_URL: Your Supabase project URL (required for STORE_BACKEND=supabase)
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
- STORE_BACKEND: "supabase" (default) or "memory"
- APP_ID: Application namespace for all collections (default: "default-app-id")
- ADMIN_TOKEN: Token that grants administrator rights over the HTTP API
- CURRENCY: Currency code shown on receipts and activity entries (default: "PHP")
- LOG_LEVEL: Root log level for the API and scripts (default: "INFO")
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from repositories.document_store import DocumentStore, InMemoryDocumentStore

# Look for .env in the project root directory
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

_BACKENDS = ("supabase", "memory")


@dataclass(frozen=True, slots=True)
class Settings:
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    store_backend: str = "supabase"
    app_id: str = "default-app-id"
    admin_token: Optional[str] = None
    currency: str = "PHP"
    log_level: str = "INFO"


def load_settings() -> Settings:
    backend = os.getenv("STORE_BACKEND", "supabase").strip().lower()
    if backend not in _BACKENDS:
        raise RuntimeError(f"Invalid STORE_BACKEND {backend!r}. Expected one of: {', '.join(_BACKENDS)}.")

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        store_backend=backend,
        app_id=os.getenv("APP_ID", "default-app-id"),
        admin_token=os.getenv("ADMIN_TOKEN") or None,
        currency=os.getenv("CURRENCY", "PHP"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def create_supabase_client(settings: Settings):
    """Create the official Supabase client from the configured credentials."""

    # The dependency is `supabase` (supabase-py): `pip install supabase`.
    from supabase import create_client  # type: ignore[import-not-found]

    if not settings.supabase_url:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )

    if not settings.supabase_key:
        raise RuntimeError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(settings.supabase_url, settings.supabase_key)


def build_document_store(settings: Settings) -> DocumentStore:
    if settings.store_backend == "memory":
        return InMemoryDocumentStore()

    from repositories.supabase_store import SupabaseDocumentStore

    return SupabaseDocumentStore(create_supabase_client(settings))


__all__ = ["Settings", "build_document_store", "create_supabase_client", "load_settings"]
