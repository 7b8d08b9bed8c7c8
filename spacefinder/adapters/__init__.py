"""
Adapters layer - Workspace and booking data sources.
"""

from .backoffice_client import BackofficeClient
from .json_source import JsonReservationSource

__all__ = ["BackofficeClient", "JsonReservationSource"]
