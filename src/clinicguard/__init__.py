"""Role-based access control for the clinic portal."""

__all__ = [
    "deps",
    "domain",
    "guards",
    "infrastructure",
    "middleware",
    "ports",
    "routers",
    "schemas",
]
