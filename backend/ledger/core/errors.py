"""
Error taxonomy for the record-reconciliation layer

Every error carries a ``user_message`` that the HTTP boundary shows verbatim,
either as a notification or inline in the region that triggered it.
"""
from typing import Optional


class LedgerError(Exception):
    """Base class for errors surfaced to the operator"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def user_message(self) -> str:
        return self.message


# ============================================================================
# Resolution
# ============================================================================

class ResolutionError(LedgerError):
    """Free-text input could not be turned into exactly one entity"""

    outcome = "unknown"


class EmptyInputError(ResolutionError):
    outcome = "empty"

    def __init__(self):
        super().__init__("Input is empty")


class EntityNotFoundError(ResolutionError):
    outcome = "not_found"

    def __init__(self, term: str):
        super().__init__(f'Country "{term}" not found.')
        self.term = term


class AmbiguousEntityError(ResolutionError):
    outcome = "ambiguous"

    def __init__(self, term: str, count: int, example: str):
        super().__init__(
            f'Ambiguous search "{term}". Found {count} matches '
            f'(e.g., {example}). Please be more specific.'
        )
        self.term = term
        self.count = count
        self.example = example


# ============================================================================
# Store
# ============================================================================

class StoreError(LedgerError):
    """A call to the relational store failed"""

    def __init__(self, operation: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        super().__init__(message or f"Store error during {operation}: {cause}")
        self.operation = operation
        self.cause = cause


class DuplicatePeriodError(StoreError):
    """An observation already exists for (entity_code, period)"""

    def __init__(self, entity_code: str, period: int, cause: Optional[BaseException] = None):
        super().__init__(
            "insert_observation",
            cause,
            message=f"A record for {entity_code} in {period} already exists.",
        )
        self.entity_code = entity_code
        self.period = period


# ============================================================================
# Commit (inline row edit)
# ============================================================================

class CommitError(LedgerError):
    """Saving an edited row failed; the row stays addressable for retry"""

    def __init__(self, observation_id: int, message: str):
        super().__init__(message)
        self.observation_id = observation_id


class StoreUnavailableError(CommitError):
    def __init__(self, observation_id: int, cause: Optional[StoreError] = None):
        detail = cause.user_message if cause is not None else "store unavailable"
        super().__init__(observation_id, f"Update Failed: {detail}")
        self.cause = cause


class RecordVanishedError(CommitError):
    def __init__(self, observation_id: int):
        super().__init__(
            observation_id,
            f"Record {observation_id} no longer exists; it was removed by another action.",
        )


class InvalidValueError(CommitError):
    """The submitted value is not a number; nothing was written"""

    def __init__(self, observation_id: int, raw_value: Optional[str]):
        super().__init__(observation_id, "Value must be a number.")
        self.raw_value = raw_value
