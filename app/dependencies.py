"""
Dependency Injection Configuration

Holds the process-scoped services (HTTP client, EPG service) and exposes them
to FastAPI routes through ``Depends``. Tests register their own instances or
use ``app.dependency_overrides``.
"""
import logging
from typing import Any, TypeVar

from app.services.epg_service import EPGService


logger = logging.getLogger(__name__)

T = TypeVar('T')


class ServiceLocator:
    """
    Simple service locator for managing application services.

    Provides a centralized place to access configured services throughout the application.
    """

    def __init__(self):
        """Initialize the service locator."""
        self._singletons: dict[type, Any] = {}

    def register_singleton(self, service_type: type[T], instance: T) -> None:
        """
        Register a singleton service instance.

        Args:
            service_type: The service interface/type
            instance: The concrete instance to use
        """
        self._singletons[service_type] = instance
        logger.debug(f"Registered singleton: {service_type.__name__}")

    def get(self, service_type: type[T]) -> T:
        """
        Get a service instance.

        Raises:
            KeyError: If service type is not registered
        """
        if service_type in self._singletons:
            return self._singletons[service_type]

        raise KeyError(f"Service {service_type.__name__} not registered in container")


# Global service locator instance
_service_locator: ServiceLocator | None = None


def get_service_locator() -> ServiceLocator:
    """
    Get the global service locator instance.

    Returns:
        The global ServiceLocator
    """
    global _service_locator
    if _service_locator is None:
        _service_locator = ServiceLocator()
    return _service_locator


def reset_service_locator() -> None:
    """
    Reset the service locator (mainly for testing).

    WARNING: Only use this in test environments!
    """
    global _service_locator
    _service_locator = None


def get_epg_service() -> EPGService:
    """FastAPI dependency returning the process-wide EPG service"""
    return get_service_locator().get(EPGService)
