"""
app/store/session.py — Process-wide store instance and FastAPI dependencies.

Usage:
    from app.store.session import get_store, get_session_id

    # As FastAPI dependencies:
    def my_route(
        store: SessionStore = Depends(get_store),
        session_id: str = Depends(get_session_id),
    ):
        ...

Tests swap the store via app.dependency_overrides[get_store].
"""

from typing import Optional

from fastapi import Header

from app.store.repository import DEFAULT_SESSION_ID, InMemorySessionStore, SessionStore

store: SessionStore = InMemorySessionStore()


def get_store() -> SessionStore:
    """FastAPI dependency returning the process-wide session store."""
    return store


def get_session_id(
    x_session_id: Optional[str] = Header(default=None, alias="X-Session-Id"),
) -> str:
    """Session key from the X-Session-Id header; one shared session when absent."""
    if x_session_id and x_session_id.strip():
        return x_session_id.strip()
    return DEFAULT_SESSION_ID
