"""Marshmallow schemas for request validation and response shaping."""

from .auth import (
    ClaimSetSchema,
    LoginSchema,
    RefreshSchema,
    RegisterResponseSchema,
    RegisterSchema,
    TokenPairSchema,
)

__all__ = [
    "ClaimSetSchema",
    "LoginSchema",
    "RefreshSchema",
    "RegisterResponseSchema",
    "RegisterSchema",
    "TokenPairSchema",
]
