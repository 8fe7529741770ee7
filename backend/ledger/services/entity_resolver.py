"""
Entity resolver: turns free-text operator input into exactly one entity code
"""
from typing import Optional

from ledger.components.contracts import ResolvedEntity
from ledger.core.errors import (AmbiguousEntityError, EmptyInputError,
                                EntityNotFoundError, ResolutionError)
from ledger.core.logging_config import LoggingConfig
from ledger.core.metrics import entity_resolutions_total
from ledger.services.entity_store import EntityStore

logger = LoggingConfig.get_logger(__name__)


class EntityResolver:
    """
    Resolve names or codes typed by the operator.

    An exact name/code match always wins. Otherwise a substring match on the name
    must be unique: several candidates raise AmbiguousEntityError instead of
    picking one, so mutations never run against a guessed entity.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def resolve(self, text: Optional[str]) -> ResolvedEntity:
        """
        Resolve input to an entity

        Raises:
            EmptyInputError: input is blank
            EntityNotFoundError: nothing matches
            AmbiguousEntityError: several names contain the input
        """
        term = (text or "").strip()
        try:
            return self._resolve(term)
        except ResolutionError as e:
            entity_resolutions_total.labels(outcome=e.outcome).inc()
            logger.info(f"Resolution of {term!r} failed: {e.user_message}")
            raise

    def resolve_selection(
        self,
        entity_code: Optional[str] = None,
        manual_search: Optional[str] = None,
    ) -> Optional[str]:
        """
        Pick the entity code from a dropdown value or a free-text search

        Free text takes precedence when both are given. Returns None when
        neither carries a value.
        """
        if manual_search and manual_search.strip():
            return self.resolve(manual_search).code
        if entity_code and entity_code.strip():
            return entity_code.strip()
        return None

    def _resolve(self, term: str) -> ResolvedEntity:
        if not term:
            raise EmptyInputError()

        exact = self.store.find_entities_exact(term)
        if len(exact) == 1:
            entity_resolutions_total.labels(outcome="exact").inc()
            return ResolvedEntity(code=exact[0].code, name=exact[0].name)

        partial = self.store.find_entities_by_name_substring(term)
        if not partial:
            raise EntityNotFoundError(term)
        if len(partial) > 1:
            raise AmbiguousEntityError(term, len(partial), partial[0].name)

        entity_resolutions_total.labels(outcome="partial").inc()
        return ResolvedEntity(code=partial[0].code, name=partial[0].name)
