"""
Remote data gateways for Project Showcase.
"""

from .base import BaseGateway, get_gateway, list_gateways, register_gateway
from .memory_gateway import MemoryGateway, MemoryStore
from .supabase_gateway import SupabaseGateway

__all__ = [
    "BaseGateway",
    "get_gateway",
    "list_gateways",
    "register_gateway",
    "MemoryGateway",
    "MemoryStore",
    "SupabaseGateway",
]
