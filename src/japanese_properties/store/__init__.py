"""
Store Package

In-memory, generation-based storage for uploaded property records.
"""

from src.japanese_properties.store.property_store import PropertyStore, StoreSnapshot

__all__ = ["PropertyStore", "StoreSnapshot"]
