"""
Domain models for interpretations and stored conversation contexts.

Raw context records are validated here, at the store boundary, so resolvers
never have to guess the shape of a context payload.
"""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .exceptions import ContextValidationError

logger = logging.getLogger(__name__)


class AnnotationType(str, Enum):
    """Mark types the vision pipeline can detect on a fax."""
    CIRCLE = "circle"
    CHECKMARK = "checkmark"
    UNDERLINE = "underline"
    ARROW = "arrow"
    CHECKBOX = "checkbox"


class ContextStatus(str, Enum):
    ACTIVE = "active"
    WAITING_REPLY = "waiting_reply"
    CLOSED = "closed"


LIVE_STATUSES = frozenset({ContextStatus.ACTIVE.value, ContextStatus.WAITING_REPLY.value})


class VisualAnnotation(BaseModel):
    type: AnnotationType
    confidence: float = Field(ge=0.0, le=1.0)
    associated_text: Optional[str] = None


class InterpretationResult(BaseModel):
    """Structured output of OCR/vision analysis for one incoming fax."""
    extracted_text: str = ""
    reference_id: Optional[str] = None
    visual_annotations: List[VisualAnnotation] = Field(default_factory=list)
    intent: str = "unknown"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class LastInterpretation(BaseModel):
    intent: str
    confidence: float
    timestamp: str


class _ContextDataBase(BaseModel):
    model_config = ConfigDict(extra="allow")

    topic: Optional[str] = None
    expected_selections: Optional[List[str]] = None
    last_interpretation: Optional[LastInterpretation] = None


class ActiveContextData(_ContextDataBase):
    status: Literal["active"] = "active"


class WaitingReplyContextData(_ContextDataBase):
    status: Literal["waiting_reply"] = "waiting_reply"


class ClosedContextData(_ContextDataBase):
    status: Literal["closed"] = "closed"


ContextData = Annotated[
    Union[ActiveContextData, WaitingReplyContextData, ClosedContextData],
    Field(discriminator="status"),
]

_context_data_adapter = TypeAdapter(ContextData)


def parse_context_data(raw: Any) -> Optional[_ContextDataBase]:
    """
    Validate a raw context payload.

    Corrupt payloads are not an error for recovery purposes; they simply
    carry no usable signal.

    :param raw: Payload as stored (dict, model instance or None)
    :return: Typed context data, or None if the payload is missing or invalid
    """
    if raw is None:
        return None
    if isinstance(raw, _ContextDataBase):
        return raw

    try:
        return _context_data_adapter.validate_python(raw)
    except ValidationError as e:
        logger.warning(f"Ignoring malformed context data: {e.error_count()} validation error(s)")
        return None


class ConversationContext(BaseModel):
    """A stored conversation thread, owned by exactly one user."""
    id: str
    user_id: str
    reference_id: Optional[str] = None
    context_type: Optional[str] = None
    context_data: Optional[ContextData] = None
    created_at: datetime
    updated_at: datetime
    expires_at: datetime

    @field_validator("created_at", "updated_at", "expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Stores that drop the offset write UTC; comparisons need aware values."""
        if value.tzinfo is None or value.utcoffset() is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ConversationContext":
        """
        Build a context from a raw store record.

        The payload under "context_data" is validated separately so a corrupt
        payload degrades to None instead of rejecting the whole record.

        :param record: Mapping with the context columns
        :return: ConversationContext
        :raises: ContextValidationError if the envelope fields are invalid
        """
        fields = dict(record)
        fields["context_data"] = parse_context_data(fields.get("context_data"))

        try:
            return cls.model_validate(fields)
        except ValidationError as e:
            raise ContextValidationError(f"Invalid context record {record.get('id')!r}: {e}")

    @property
    def status(self) -> Optional[str]:
        if self.context_data is None:
            return None
        return self.context_data.status

    @property
    def topic(self) -> Optional[str]:
        if self.context_data is None:
            return None
        return self.context_data.topic

    @property
    def expected_selections(self) -> List[str]:
        if self.context_data is None or not self.context_data.expected_selections:
            return []
        return list(self.context_data.expected_selections)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_live(self, now: datetime) -> bool:
        """Unexpired and either active or waiting for a reply."""
        return not self.is_expired(now) and self.status in LIVE_STATUSES
