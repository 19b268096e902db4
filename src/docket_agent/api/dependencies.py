"""
Collaborator providers for the API routes.
"""

from ..services import calendar_service, case_store, email_service, extraction_service


def get_case_store():
    return case_store


def get_scheduler():
    return calendar_service


def get_notifier():
    return email_service


def get_extractor():
    return extraction_service
