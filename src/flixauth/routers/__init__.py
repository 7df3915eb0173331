"""Routers package public exports."""

__all__ = [
    "auth",
    "health",
]
