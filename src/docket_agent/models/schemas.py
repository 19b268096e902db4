"""
Request and response schemas for the voice-note workflow API.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from .domain import ActorContext, OperationLogEntry
from .enums import ResultStatus, RunStatus


class VoiceNoteRequest(BaseModel):
    """Request model for processing a transcribed voice note."""
    transcription: Optional[str] = Field(None, description="Transcribed voice note text")
    text: Optional[str] = Field(None, description="Alternative field name for the transcription")
    message: Optional[str] = Field(None, description="Alternative field name for the transcription")
    actor: ActorContext = Field(..., description="Lawyer who recorded the voice note")

    def get_transcription(self) -> Optional[str]:
        for candidate in (self.transcription, self.text, self.message):
            if candidate and candidate.strip():
                return candidate.strip()
        return None


class MatchCandidate(BaseModel):
    """A case offered back to the user when a lookup is ambiguous."""
    id: str
    case_name: Optional[str] = None
    case_number: Optional[str] = None


class ExistingCaseRef(BaseModel):
    """Reference to the case that blocked a duplicate creation."""
    id: Optional[str] = None
    case_name: Optional[str] = None
    case_number: Optional[str] = None
    record_url: Optional[str] = None


class CaseResult(BaseModel):
    """Result of processing one extracted case payload."""
    status: ResultStatus
    case_name: Optional[str] = None
    case_number: Optional[str] = None
    case_id: Optional[str] = None
    record_url: Optional[str] = None
    is_draft: Optional[bool] = None
    missing_fields: Optional[List[str]] = None
    outcome: Optional[str] = None
    hearing_number: Optional[int] = None
    next_date: Optional[str] = None
    calendar_event: Optional[Dict[str, Any]] = None
    email_sent: bool = False
    email_to: Optional[str] = None
    existing_case: Optional[ExistingCaseRef] = None
    matches: Optional[List[MatchCandidate]] = None
    message: Optional[str] = None
    suggestion: Optional[str] = None
    error: Optional[str] = None
    actions: List[str] = []


class WorkflowResult(BaseModel):
    """Aggregated result of one workflow run over a transcript."""
    success: bool
    status: RunStatus
    summary: Optional[str] = None
    message: Optional[str] = None
    cases_found: Optional[int] = None
    cases_processed: Optional[int] = None
    cases: List[CaseResult] = []
    operations: List[OperationLogEntry] = []
    error: Optional[str] = None
