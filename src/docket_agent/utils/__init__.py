"""
Utilities package for the voice-note case workflow.
"""

from .prompts import load_system_prompt, load_extraction_prompt
from .similarity import similarity
from .helpers import (
    generate_case_number,
    is_real_email,
    parse_date,
    parse_hearing_time,
    format_date,
    truncate_email
)
from .errors import (
    DocketAgentError,
    CaseNotFoundError,
    AmbiguousCaseError,
    CaseAlreadyExistsError,
    ExternalServiceError,
    AIProcessingError
)

__all__ = [
    "load_system_prompt",
    "load_extraction_prompt",
    "similarity",
    "generate_case_number",
    "is_real_email",
    "parse_date",
    "parse_hearing_time",
    "format_date",
    "truncate_email",
    "DocketAgentError",
    "CaseNotFoundError",
    "AmbiguousCaseError",
    "CaseAlreadyExistsError",
    "ExternalServiceError",
    "AIProcessingError"
]
