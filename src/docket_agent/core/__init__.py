"""
Core package for the case resolution workflow and application lifecycle.
"""

from .lifecycle import lifespan
from .actor import normalize_actor
from .email_policy import resolve_client_email
from .matcher import CaseMatcher
from .duplicates import DuplicateDetector
from .operation_log import OperationLog
from .orchestrator import WorkflowOrchestrator, map_status

__all__ = [
    "lifespan",
    "normalize_actor",
    "resolve_client_email",
    "CaseMatcher",
    "DuplicateDetector",
    "OperationLog",
    "WorkflowOrchestrator",
    "map_status"
]
