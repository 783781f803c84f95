"""
Supabase initialization and helpers
"""

from __future__ import annotations

import logging
from typing import Optional

from supabase import AsyncClient, acreate_client

from app.core.config import Settings

logger = logging.getLogger(__name__)


async def create_supabase_client(settings: Settings) -> Optional[AsyncClient]:
    """Create the async Supabase client, or return None when it cannot be created.

    Expects SUPABASE_URL and SUPABASE_ANON_KEY. Missing settings are logged as a
    warning; so is a failure to build the client. Callers decide whether to
    fall back to the local store.
    """
    if not settings.supabase_configured:
        logger.warning("Supabase URL or anon key missing; remote guest store disabled")
        return None

    try:
        client = await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    except Exception as e:
        logger.error("Error creating Supabase client: %s", e)
        return None

    logger.info("Supabase client initialized for %s", settings.SUPABASE_URL)
    return client
