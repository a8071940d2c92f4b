"""Persisted import sessions linking a preview to its later commit.

State machine per session::

    uploaded -> previewed -> confirmed -> committed | failed

``previewed`` may be re-entered (re-map or re-preview) from ``uploaded``,
``previewed`` or ``confirmed``. ``committed`` and ``failed`` are terminal.
"""

import uuid
from datetime import timedelta
from typing import Optional

from finport.database.base import Database
from finport.domain.entities import ImportSession, ImportSessionState
from finport.domain.errors import (
    ConflictError,
    NotFoundError,
    SessionExpiredError,
    account_not_found,
    illegal_session_transition,
    session_expired,
    session_not_found,
)
from finport.importing.mapping import ColumnMapping
from finport.logging_setup import get_logger
from finport.utils.clock import utc_now

logger = get_logger(__name__)

State = ImportSessionState

ALLOWED_TRANSITIONS: dict[ImportSessionState, set[ImportSessionState]] = {
    State.UPLOADED: {State.PREVIEWED},
    State.PREVIEWED: {State.PREVIEWED, State.CONFIRMED},
    State.CONFIRMED: {State.PREVIEWED, State.COMMITTED, State.FAILED},
    State.COMMITTED: set(),
    State.FAILED: set(),
}


class ImportSessionService:
    """Create, advance and expire import sessions."""

    def __init__(self, db: Database, ttl_minutes: int = 30):
        """Initialize session service.

        Args:
            db: Database instance
            ttl_minutes: Lifetime of a new session
        """
        self.db = db
        self.ttl = timedelta(minutes=ttl_minutes)

    def start(
        self,
        account_id: int,
        filename: Optional[str],
        data: bytes,
        delimiter: Optional[str] = None,
    ) -> ImportSession:
        """Store an upload as a new session in the uploaded state.

        Raises:
            NotFoundError: If the account does not exist
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        session = self.db.create_import_session(
            session_id=uuid.uuid4().hex,
            account_id=account_id,
            filename=filename,
            content=data,
            delimiter=delimiter,
            expires_at=utc_now() + self.ttl,
        )
        logger.debug("Started import session %s for account %s", session.session_id, account_id)
        return session

    def get(self, session_id: str) -> ImportSession:
        """Return a live session.

        Raises:
            NotFoundError: If no session has this ID
            SessionExpiredError: If the session is past its expiry
        """
        session = self.db.get_import_session(session_id)
        if session is None:
            raise NotFoundError(session_not_found(session_id))
        if session.is_expired(utc_now()) and not session.state.is_terminal:
            raise SessionExpiredError(session_expired(session_id))
        return session

    def _transition(
        self,
        session_id: str,
        target: ImportSessionState,
        mapping: Optional[ColumnMapping] = None,
        batch_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> ImportSession:
        session = self.get(session_id)
        if target not in ALLOWED_TRANSITIONS[session.state]:
            raise ConflictError(
                illegal_session_transition(session_id, session.state.value, target.value)
            )
        updated = self.db.update_import_session(
            session_id,
            state=target,
            mapping=mapping.to_dict() if mapping is not None else None,
            batch_id=batch_id,
            error_message=error_message,
        )
        logger.debug("Import session %s: %s -> %s", session_id, session.state.value, target.value)
        return updated

    def record_preview(self, session_id: str, mapping: ColumnMapping) -> ImportSession:
        """Store the suggested or edited mapping and (re)enter previewed."""
        return self._transition(session_id, State.PREVIEWED, mapping=mapping)

    def confirm(self, session_id: str, mapping: ColumnMapping) -> ImportSession:
        """Fix the mapping for the upcoming commit."""
        return self._transition(session_id, State.CONFIRMED, mapping=mapping)

    def mark_committed(self, session_id: str, batch_id: str) -> ImportSession:
        return self._transition(session_id, State.COMMITTED, batch_id=batch_id)

    def mark_failed(self, session_id: str, message: str) -> ImportSession:
        return self._transition(session_id, State.FAILED, error_message=message)

    def stored_mapping(self, session: ImportSession) -> Optional[ColumnMapping]:
        """Return the mapping saved on the session, if any."""
        if session.mapping is None:
            return None
        return ColumnMapping.from_dict(session.mapping)

    def purge_expired(self) -> int:
        """Delete expired sessions and return how many were removed."""
        deleted = self.db.delete_expired_import_sessions(utc_now())
        if deleted:
            logger.info("Purged %d expired import sessions", deleted)
        return deleted
