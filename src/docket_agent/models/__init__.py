"""
Models package for the voice-note case workflow.
"""

from .enums import CaseStatus, ActionType, ActorRole, ResultStatus, RunStatus
from .domain import (
    CaseRecord,
    HearingRecord,
    ActorPreferences,
    ActorContext,
    ExtractedCasePayload,
    ExtractionResult,
    OperationLogEntry
)
from .schemas import (
    VoiceNoteRequest,
    MatchCandidate,
    ExistingCaseRef,
    CaseResult,
    WorkflowResult
)

__all__ = [
    "CaseStatus",
    "ActionType",
    "ActorRole",
    "ResultStatus",
    "RunStatus",
    "CaseRecord",
    "HearingRecord",
    "ActorPreferences",
    "ActorContext",
    "ExtractedCasePayload",
    "ExtractionResult",
    "OperationLogEntry",
    "VoiceNoteRequest",
    "MatchCandidate",
    "ExistingCaseRef",
    "CaseResult",
    "WorkflowResult"
]
