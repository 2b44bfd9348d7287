# supabase_rest/errors.py
from __future__ import annotations


class SupabaseError(Exception):
    """Base class for errors raised by the Supabase task handlers."""


class ConfigurationError(SupabaseError, ValueError):
    """
    A required setting is missing or blank (url, api key, table, payload, filter).
    Always raised before any request is sent.
    """
