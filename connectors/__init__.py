"""Connectors module"""
from .supabase_client import SupabaseAPIClient

__all__ = ["SupabaseAPIClient"]
