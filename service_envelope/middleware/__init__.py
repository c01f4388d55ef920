"""Middleware package — bearer authentication and envelope error handlers."""

from service_envelope.middleware.auth import BearerAuthMiddleware
from service_envelope.middleware.error_handler import register_error_handlers

__all__ = [
    "BearerAuthMiddleware",
    "register_error_handlers",
]
