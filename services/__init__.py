"""Business logic service layer.

This package groups higher-level operations that coordinate multiple models or
perform queries. Keeping business logic out of route handlers makes the
codebase easier to test and maintain.
"""

from services.container import Services, build_services, init_services, get_services  # noqa: F401
from services.errors import StorageError, UsernameTakenError, IdentityVerificationError  # noqa: F401
from services.user_agent_service import classify_user_agent  # noqa: F401


__all__ = [
    "Services",
    "build_services",
    "init_services",
    "get_services",
    "StorageError",
    "UsernameTakenError",
    "IdentityVerificationError",
    "classify_user_agent",
]
