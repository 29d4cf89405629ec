"""
Pydantic models for the scoring layer.

Session payloads arriving from outside are narrowed into a tagged union
(BasicSession | DetailedSession) before any formula touches them.
"""

from typing import Annotated, Any, List, Literal, Mapping, Optional, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


ResultType = Literal["EXCELLENT", "SUCCESS", "FAIL"]

DETAILED_TELEMETRY_VERSION = "v2.0"


class SessionPayloadError(ValueError):
    """Raised when an externally received session payload is malformed."""


class CamelModel(BaseModel):
    """Base model reading and writing camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SessionTelemetry(CamelModel):
    """Detailed click telemetry collected during the playing phase."""
    first_click_latency: Optional[float] = Field(None, ge=0)
    inter_click_intervals: List[float] = Field(default_factory=list)
    hesitation_periods: List[float] = Field(default_factory=list)
    spatial_errors: List[float] = Field(default_factory=list)
    sequential_accuracy: Optional[float] = Field(None, ge=0, le=1)
    temporal_order_violations: Optional[int] = Field(None, ge=0)
    version: str = Field(
        DETAILED_TELEMETRY_VERSION,
        validation_alias=AliasChoices("version", "detailedDataVersion"),
    )


class SessionCounters(CamelModel):
    """The four counters and two flags every session carries."""
    correct_placements: int = Field(..., ge=0)
    incorrect_placements: int = Field(..., ge=0)
    time_taken_ms: float = Field(..., ge=0)
    completed_successfully: bool
    order_correct: bool = False


class BasicSession(SessionCounters):
    """Session without usable detailed telemetry."""
    kind: Literal["basic"] = "basic"


class DetailedSession(SessionCounters):
    """Session carrying v2.0 telemetry."""
    kind: Literal["detailed"] = "detailed"
    telemetry: SessionTelemetry


SessionRecord = Annotated[Union[BasicSession, DetailedSession], Field(discriminator="kind")]

_session_adapter = TypeAdapter(SessionRecord)


def narrow_session(payload: Mapping[str, Any]) -> Union[BasicSession, DetailedSession]:
    """
    Validate a loosely typed session payload into a tagged session record.

    The detailed path is selected only when `detailedMetrics` is present and
    declares version v2.0; any other version falls back to the basic path.

    Args:
        payload: Session result mapping (camelCase or snake_case keys)

    Returns:
        BasicSession or DetailedSession

    Raises:
        SessionPayloadError: If the payload does not validate
    """
    if not isinstance(payload, Mapping):
        raise SessionPayloadError(f"Session payload must be a mapping, got {type(payload).__name__}")

    data = dict(payload)
    telemetry = data.pop("telemetry", None)
    telemetry = data.pop("detailed_metrics", telemetry)
    telemetry = data.pop("detailedMetrics", telemetry)
    data.pop("kind", None)

    version = None
    if isinstance(telemetry, Mapping):
        version = telemetry.get("version", telemetry.get("detailedDataVersion"))
    elif isinstance(telemetry, SessionTelemetry):
        version = telemetry.version

    if version == DETAILED_TELEMETRY_VERSION:
        data["kind"] = "detailed"
        data["telemetry"] = telemetry
    else:
        data["kind"] = "basic"

    try:
        return _session_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise SessionPayloadError(f"Invalid session payload: {e}") from e


class CognitiveMetricsResult(CamelModel):
    """Difficulty-adjusted ability scores, each an integer in [0, 100]."""
    hippocampus_activation: int = Field(..., ge=0, le=100)
    working_memory: int = Field(..., ge=0, le=100)
    processing_speed: int = Field(..., ge=0, le=100)
    attention: int = Field(..., ge=0, le=100)
    pattern_recognition: int = Field(..., ge=0, le=100)
    cognitive_flexibility: int = Field(..., ge=0, le=100)
    visuospatial_precision: int = Field(..., ge=0, le=100)
    executive_function: int = Field(..., ge=0, le=100)
    # Extended abilities
    spatial_memory_accuracy: int = Field(..., ge=0, le=100)
    response_consistency: int = Field(..., ge=0, le=100)
    learning_adaptability: int = Field(..., ge=0, le=100)
    focus_endurance: int = Field(..., ge=0, le=100)
    sequential_processing: int = Field(..., ge=0, le=100)


class RoundResult(CamelModel):
    """Result payload handed to the persistence/analytics collaborator."""
    content_id: str
    level: str = ""
    language: str = ""
    time_taken_ms: float = Field(..., ge=0)
    correct_placements: int = Field(..., ge=0)
    incorrect_placements: int = Field(..., ge=0)
    used_stones_count: int = Field(..., ge=0)
    completed_successfully: bool
    order_correct: bool
    result_type: ResultType
    score: int = Field(..., ge=0, le=100)
    placement_order: List[int] = Field(default_factory=list)
    detailed_metrics: Optional[SessionTelemetry] = None

    def to_session(self) -> Union[BasicSession, DetailedSession]:
        """Narrow this payload into the session record the metrics engine consumes."""
        return narrow_session(self.model_dump(by_alias=True, exclude_none=True))
