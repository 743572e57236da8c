"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceContainer,
    get_analysis_service,
    get_broadcaster,
    get_services,
    get_session_store,
    verify_origin,
)

__all__ = [
    "ServiceContainer",
    "get_analysis_service",
    "get_broadcaster",
    "get_services",
    "get_session_store",
    "verify_origin",
]
