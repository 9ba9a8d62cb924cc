"""External presence service adapters."""

from setstatus.services.base import ServiceError, service_error_summary
from setstatus.services.factory import ServiceFactory

__all__ = [
    "ServiceError",
    "ServiceFactory",
    "service_error_summary",
]
