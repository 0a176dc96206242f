"""
Shared layer for Bornfidis Provisions: logging, monitoring, the database,
I/O schemas, outbound service clients and phone number helpers.
"""

from bornfidis_provisions.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
