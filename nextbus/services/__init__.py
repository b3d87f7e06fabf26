"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .next_bus import NextBusService, TimetableStoreProtocol, create_service

__all__ = ["NextBusService", "TimetableStoreProtocol", "create_service"]
