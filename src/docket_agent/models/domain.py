"""
Domain models for case records, hearings, actors and extracted case payloads.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import ActorRole


# =================================================================
# CASE STORE MODELS
# =================================================================

class CaseRecord(BaseModel):
    """Model representing a persisted case as returned by the case store."""
    model_config = ConfigDict(extra="ignore")

    id: str
    case_name: Optional[str] = None
    case_number: Optional[str] = None
    status: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    junior_name: Optional[str] = None
    junior_email: Optional[str] = None
    summary: Optional[str] = None
    latest_outcome: Optional[str] = None
    hearing_count: int = 0
    next_hearing: Optional[str] = None
    documents_needed: List[str] = []
    client_welcome_sent: bool = False
    assigned_to: Optional[str] = None
    created_by: Optional[str] = None
    last_updated: Optional[str] = None

    @field_validator("hearing_count", mode="before")
    @classmethod
    def _default_hearing_count(cls, value: Any) -> int:
        return value or 0

    @field_validator("documents_needed", mode="before")
    @classmethod
    def _split_documents(cls, value: Any) -> List[str]:
        # The store keeps documents as a comma-joined text field
        if not value:
            return []
        if isinstance(value, str):
            return [doc.strip() for doc in value.split(",") if doc.strip()]
        return list(value)

    @field_validator("client_welcome_sent", mode="before")
    @classmethod
    def _default_welcome_flag(cls, value: Any) -> bool:
        return bool(value)


class HearingRecord(BaseModel):
    """Model representing one court appearance recorded against a case."""
    date: str
    description: str = ""
    outcome: str = ""
    next_steps: str = ""
    documents: List[str] = []
    court: str = ""
    next_hearing_date: Optional[str] = None


# =================================================================
# ACTOR CONTEXT
# =================================================================

class ActorPreferences(BaseModel):
    """Per-lawyer workflow preferences."""
    model_config = ConfigDict(frozen=True)

    auto_assign_to_junior: bool = False
    send_client_emails: bool = True
    reminder_hours_before: int = 24


class ActorContext(BaseModel):
    """Read-only identity of the lawyer who recorded the voice note."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: ActorRole = ActorRole.SENIOR
    email: Optional[str] = None
    junior_name: Optional[str] = None
    junior_email: Optional[str] = None
    google_calendar_id: str = "primary"
    preferences: ActorPreferences = Field(default_factory=ActorPreferences)

# =================================================================
# EXTRACTION MODELS
# =================================================================

class ExtractedCasePayload(BaseModel):
    """
    One case reference pulled out of a transcript by the entity extractor.

    Values are normalized on receipt: blank strings become None, missing
    lists become empty lists and a null assign_to_junior becomes False.
    action_type is kept as a plain string so unsupported values can be
    reported back rather than rejected.
    """
    model_config = ConfigDict(extra="ignore")

    action_type: Optional[str] = None
    confidence: Optional[str] = None
    lookup_key: Optional[str] = None
    case_name: Optional[str] = None
    case_number: Optional[str] = None
    case_summary: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    junior_name: Optional[str] = None
    junior_email: Optional[str] = None
    outcome: Optional[str] = None
    status: Optional[str] = None
    next_hearing_date: Optional[str] = None
    next_hearing_time: Optional[str] = None
    documents_needed: List[str] = []
    assign_to_junior: bool = False
    missing_fields: List[str] = []
    raw_notes: Optional[str] = None

    @field_validator(
        "action_type", "lookup_key", "case_name", "case_number", "case_summary",
        "client_name", "client_email", "client_phone", "junior_name", "junior_email",
        "outcome", "status", "next_hearing_date", "next_hearing_time", "raw_notes",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("documents_needed", "missing_fields", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, str):
            return [value]
        return [str(item) for item in value if item]

    @field_validator("assign_to_junior", mode="before")
    @classmethod
    def _default_false(cls, value: Any) -> bool:
        return bool(value)

    @property
    def reference(self) -> Optional[str]:
        """Lookup key, falling back to the case name."""
        return self.lookup_key or self.case_name


class ExtractionResult(BaseModel):
    """Full structured output of the entity extractor for one transcript."""
    model_config = ConfigDict(extra="ignore")

    cases: List[ExtractedCasePayload] = []
    overall_summary: Optional[str] = None
    requires_clarification: bool = False
    clarification_message: Optional[str] = None

    @field_validator("cases", mode="before")
    @classmethod
    def _default_cases(cls, value: Any) -> Any:
        return value or []

    @field_validator("requires_clarification", mode="before")
    @classmethod
    def _default_clarification(cls, value: Any) -> bool:
        return bool(value)


# =================================================================
# AUDIT TRAIL
# =================================================================

class OperationLogEntry(BaseModel):
    """Model representing one step recorded during a workflow run."""
    timestamp: str
    type: str
    message: str
    user: Optional[str] = None
