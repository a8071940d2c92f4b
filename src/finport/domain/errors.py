"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or illegal state changes."""


class ParseError(ValidationError):
    """The uploaded file could not be read as CSV."""


class NoDataRowsError(ParseError):
    """Parsing left no usable data rows."""


class InvalidMappingError(ValidationError):
    """A column mapping cannot be used for a commit."""


class SessionExpiredError(ConflictError):
    """The import session is past its expiry."""


class StorageError(DomainError):
    """The final batch insert failed; nothing was written."""


class RowValidationError(DomainError):
    """A single statement row could not be turned into a transaction.

    These never abort an import. The committer collects them per row.
    """

    code = "RowError"


class MissingFieldError(RowValidationError):
    """A required source cell is empty."""

    code = "MissingField"


class InvalidDateError(RowValidationError):
    """The date cell does not match any accepted date format."""

    code = "InvalidDate"


class InvalidAmountError(RowValidationError):
    """The amount cells do not yield exactly one non-zero side."""

    code = "InvalidAmount"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def batch_not_found(batch_id: str) -> str:
    """Return message for missing import batch."""
    return f"Import batch '{batch_id}' not found"


def session_not_found(session_id: str) -> str:
    """Return message for missing import session."""
    return f"Import session '{session_id}' not found"


def session_expired(session_id: str) -> str:
    """Return message for an expired import session."""
    return f"Import session '{session_id}' has expired; upload the file again"


def illegal_session_transition(session_id: str, current: str, target: str) -> str:
    """Return message for a state change the session does not allow."""
    return f"Import session '{session_id}' is {current} and cannot become {target}"


def missing_mapping_fields(fields: list[str]) -> str:
    """Return message when a mapping lacks required assignments."""
    return f"Mapping is missing required fields: {', '.join(fields)}"
