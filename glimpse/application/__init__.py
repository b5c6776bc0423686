"""Application layer - backend access services and the session.

Services are independent of HTTP/FastAPI and can be tested in isolation.
"""

from .backend import Backend, create_backend
from .session import SessionStore

__all__ = [
    "Backend",
    "create_backend",
    "SessionStore",
]
