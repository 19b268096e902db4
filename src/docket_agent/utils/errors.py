"""
Exception hierarchy for the voice-note case workflow.
"""

from typing import Any, Dict, List


class DocketAgentError(Exception):
    """Base error carrying an HTTP status and a machine-readable code."""

    def __init__(self, message: str, status_code: int = 500, error_code: str = "INTERNAL_ERROR"):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "status_code": self.status_code
        }


class CaseNotFoundError(DocketAgentError):
    def __init__(self, identifier: str):
        super().__init__(f"Case not found: {identifier}", 404, "CASE_NOT_FOUND")
        self.identifier = identifier


class AmbiguousCaseError(DocketAgentError):
    """Raised when a lookup key matches several cases and none clearly wins."""

    def __init__(self, matches: List[Dict[str, Any]]):
        super().__init__(
            f"Multiple cases found ({len(matches)}). Please specify which case.",
            409,
            "AMBIGUOUS_CASE"
        )
        self.matches = matches


class CaseAlreadyExistsError(DocketAgentError):
    def __init__(self, existing_case: Dict[str, Any]):
        super().__init__(
            f"A case already exists: {existing_case.get('case_name')}",
            409,
            "CASE_ALREADY_EXISTS"
        )
        self.existing_case = existing_case


class ExternalServiceError(DocketAgentError):
    def __init__(self, service: str, message: str):
        super().__init__(f"{service} error: {message}", 502, "EXTERNAL_SERVICE_ERROR")
        self.service = service


class AIProcessingError(DocketAgentError):
    def __init__(self, message: str):
        super().__init__(f"AI processing failed: {message}", 500, "AI_PROCESSING_ERROR")

