"""
Enumerations for the voice-note case workflow.
"""

from enum import Enum


class CaseStatus(str, Enum):
    """
    Case status vocabulary used by the case store.

    - DRAFT: Case is missing mandatory information
    - ACTIVE: Case is complete and open
    - CONTINUING: Case has further hearings scheduled
    - FINALIZED: Court has concluded the matter
    - CLOSED: Case is archived; irreversible through the voice workflow
    - ACTION_REQUIRED: Case needs lawyer attention
    """
    DRAFT = "Draft"
    ACTIVE = "Active"
    CONTINUING = "Continuing"
    FINALIZED = "Finalized"
    CLOSED = "Closed"
    ACTION_REQUIRED = "Action Required"


class ActionType(str, Enum):
    """Intent classified by the entity extractor for one case payload."""
    UPDATE_EXISTING = "UPDATE_EXISTING"
    CREATE_NEW = "CREATE_NEW"
    CLARIFICATION_NEEDED = "CLARIFICATION_NEEDED"


class ActorRole(str, Enum):
    SENIOR = "SENIOR"
    JUNIOR = "JUNIOR"


class ResultStatus(str, Enum):
    """Outcome of processing a single case payload."""
    UPDATED = "UPDATED"
    CREATED = "CREATED"
    CREATED_AS_DRAFT = "CREATED_AS_DRAFT"
    DUPLICATE_CASE = "DUPLICATE_CASE"
    CLARIFICATION_NEEDED = "CLARIFICATION_NEEDED"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    ERROR = "ERROR"


class RunStatus(str, Enum):
    """Outcome of a whole workflow run."""
    COMPLETED = "COMPLETED"
    CLARIFICATION_NEEDED = "CLARIFICATION_NEEDED"
    ERROR = "ERROR"
