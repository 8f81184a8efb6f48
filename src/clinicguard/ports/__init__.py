"""Ports package - defines interfaces for external collaborators.

The authorization engine only consumes a session and, through its callers,
emits audit events; both sit behind these protocols.
"""

from .audit import AuditSink
from .session import SessionProvider

__all__ = [
    "AuditSink",
    "SessionProvider",
]
