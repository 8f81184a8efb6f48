"""Routers package public exports."""

__all__ = [
    "access",
    "dashboard",
    "health",
]
