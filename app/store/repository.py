"""
app/store/repository.py — All reads and writes of offer / lead / result state.

Business logic never touches the underlying storage directly; everything goes
through a SessionStore. The in-memory implementation keeps one state record
per session id and replaces each slot atomically under a lock, so a scoring
run always sees a consistent (offer, leads) pair.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from app.domain.models import Lead, Offer, ScoredLead

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "default"


@dataclass(frozen=True)
class SessionSnapshot:
    """Offer and lead batch as they were at one instant."""
    offer: Optional[Offer]
    leads: tuple[Lead, ...]


@dataclass
class SessionState:
    offer: Optional[Offer] = None
    leads: tuple[Lead, ...] = ()
    results: tuple[ScoredLead, ...] = ()


class SessionStore(Protocol):
    def save_offer(self, session_id: str, offer: Offer) -> None: ...
    def get_offer(self, session_id: str) -> Optional[Offer]: ...
    def replace_leads(self, session_id: str, leads: Iterable[Lead]) -> None: ...
    def get_leads(self, session_id: str) -> tuple[Lead, ...]: ...
    def replace_results(self, session_id: str, results: Iterable[ScoredLead]) -> None: ...
    def get_results(self, session_id: str) -> tuple[ScoredLead, ...]: ...
    def snapshot(self, session_id: str) -> SessionSnapshot: ...
    def clear(self, session_id: str) -> None: ...


class InMemorySessionStore:
    """Non-persistent SessionStore; state is lost on restart."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionState] = {}
        self._lock = threading.Lock()

    # Both helpers: caller must hold self._lock

    def _writable(self, session_id: str) -> SessionState:
        return self._sessions.setdefault(session_id, SessionState())

    def _readable(self, session_id: str) -> SessionState:
        # Unknown ids read as empty without being registered
        return self._sessions.get(session_id) or SessionState()

    # ── Offer ─────────────────────────────────────────────────────────────────

    def save_offer(self, session_id: str, offer: Offer) -> None:
        with self._lock:
            self._writable(session_id).offer = offer
        logger.debug("Session %s: offer replaced (%s)", session_id, offer.name)

    def get_offer(self, session_id: str) -> Optional[Offer]:
        with self._lock:
            return self._readable(session_id).offer

    # ── Leads ─────────────────────────────────────────────────────────────────

    def replace_leads(self, session_id: str, leads: Iterable[Lead]) -> None:
        batch = tuple(leads)
        with self._lock:
            self._writable(session_id).leads = batch
        logger.debug("Session %s: lead batch replaced (%d leads)", session_id, len(batch))

    def get_leads(self, session_id: str) -> tuple[Lead, ...]:
        with self._lock:
            return self._readable(session_id).leads

    # ── Results ───────────────────────────────────────────────────────────────

    def replace_results(self, session_id: str, results: Iterable[ScoredLead]) -> None:
        batch = tuple(results)
        with self._lock:
            self._writable(session_id).results = batch
        logger.debug("Session %s: results replaced (%d rows)", session_id, len(batch))

    def get_results(self, session_id: str) -> tuple[ScoredLead, ...]:
        with self._lock:
            return self._readable(session_id).results

    # ── Whole session ─────────────────────────────────────────────────────────

    def snapshot(self, session_id: str) -> SessionSnapshot:
        with self._lock:
            state = self._readable(session_id)
            return SessionSnapshot(offer=state.offer, leads=state.leads)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)
