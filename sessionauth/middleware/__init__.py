"""ASGI middleware."""

from sessionauth.middleware.session import ServerSessionMiddleware, SessionData

__all__ = ["ServerSessionMiddleware", "SessionData"]
