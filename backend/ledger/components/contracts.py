"""
Contract models passed between the store, the ledger components and the HTTP boundary.

Components never hand ORM instances around: the store returns request-scoped copies
(EntityRecord, ObservationRecord) and components produce Fragment values that the
boundary serializes with Jinja2.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ledger.core.errors import CommitError


class EntityRecord(BaseModel):
    code: str
    name: str
    region_group: Optional[str] = None


class ResolvedEntity(BaseModel):
    code: str
    name: str


class ObservationRecord(BaseModel):
    id: int
    entity_code: str
    period: int
    value: float


class RowState(str, Enum):
    """Presentation state of one observation row"""
    READ_ONLY = "read_only"
    EDITING = "editing"


class ListMode(str, Enum):
    """Which affordance the rows of a managed list carry"""
    EDIT = "edit"
    DELETE = "delete"


class Fragment(BaseModel):
    """
    One unit of rendered output addressed to one screen region.

    ``template`` is None for the empty fragment, which removes its target when
    swapped in (outerHTML replacement with nothing).
    """
    template: Optional[str] = None
    region_id: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def empty(cls, region_id: Optional[str] = None) -> "Fragment":
        return cls(template=None, region_id=region_id)

    @property
    def is_empty(self) -> bool:
        return self.template is None


class Notification(BaseModel):
    """Ephemeral client-side message carried on the out-of-band signal channel"""
    kind: Literal["showMessage", "showError"] = "showMessage"
    message: str


class OutOfBandPayload(BaseModel):
    region_id: str
    fragment: Fragment


class MultiRegionResponse(BaseModel):
    primary: Fragment
    out_of_band: List[OutOfBandPayload] = Field(default_factory=list)
    notifications: List[Notification] = Field(default_factory=list)


class CommitOutcome(BaseModel):
    """Result of saving an edited row: the fragment to swap in plus what happened"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    fragment: Fragment
    observation: Optional[ObservationRecord] = None
    error: Optional[CommitError] = None
    notifications: List[Notification] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.error is None
