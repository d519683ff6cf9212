"""Exceptions raised by the Supabase client for failed requests."""

import httpx
from supabase import PostgrestAPIError

SUPABASE_ERRORS: tuple[type[Exception], ...] = (PostgrestAPIError, httpx.HTTPError)
