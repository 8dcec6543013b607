"""Authentication and session-token lifecycle."""

from .service import AuthService
from .wiring import assemble, build_auth_service, get_auth_service

__all__ = ["AuthService", "assemble", "build_auth_service", "get_auth_service"]
