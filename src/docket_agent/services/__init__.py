"""
Services package for the voice-note case workflow.
"""

from .http_client import http_client_service
from .case_store import BackendCaseStore
from .calendar_service import CalendarService
from .email_service import EmailService
from .extraction_service import ExtractionService

# Global service instances
case_store = BackendCaseStore()
calendar_service = CalendarService()
email_service = EmailService()
extraction_service = ExtractionService()

__all__ = [
    "http_client_service",
    "BackendCaseStore",
    "CalendarService",
    "EmailService",
    "ExtractionService",
    "case_store",
    "calendar_service",
    "email_service",
    "extraction_service"
]
