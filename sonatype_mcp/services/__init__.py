from .admin import AdminService
from .components import ComponentService
from .quarantine import QuarantineService
from .repositories import RepositoryService

__all__ = [
    "AdminService",
    "ComponentService",
    "QuarantineService",
    "RepositoryService",
]
