"""
Service layer interfaces and implementations.
"""

from .interfaces import IAuthService, IHealthService, INoteService, ISearchService, ISharingService

from .auth_service import AuthService
from .health_service import HealthService
from .maintenance_service import MaintenanceService
from .note_service import NoteService
from .search_service import SearchService
from .sharing_service import SharingService

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",
    "ISearchService",
    "ISharingService",
    "IHealthService",
    # Implementations
    "AuthService",
    "NoteService",
    "SearchService",
    "SharingService",
    "HealthService",
    "MaintenanceService",
]
