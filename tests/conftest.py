"""
Shared fixtures and in-memory collaborators for the workflow tests.
"""

import uuid

import pytest

from docket_agent.models import (
    ActorContext,
    ActorPreferences,
    ActorRole,
    CaseRecord,
    CaseStatus,
    ExtractionResult,
)
from docket_agent.services.calendar_service import CalendarService
from docket_agent.services.email_service import EmailService
from docket_agent.utils.errors import CaseNotFoundError, ExternalServiceError
from docket_agent.utils.helpers import generate_case_number


class FakeCaseStore:
    """In-memory case store with the same search semantics as the backend."""

    def __init__(self):
        self.cases = {}
        self.hearings = []
        self.notes = []
        self.created = []
        self.updates = []
        self.closed = []
        self.fail_search = False

    def is_available(self):
        return True

    def add_case(self, **fields) -> CaseRecord:
        fields.setdefault("id", str(uuid.uuid4()))
        fields.setdefault("status", CaseStatus.ACTIVE.value)
        case = CaseRecord(**fields)
        self.cases[case.id] = case
        return case

    async def search(self, query):
        if self.fail_search:
            raise ExternalServiceError("Case store", "search unavailable")

        needle = query.lower()
        results = [
            case for case in self.cases.values()
            if any(needle in (value or "").lower() for value in (case.case_name, case.case_number, case.client_name))
        ]

        keywords = [word for word in needle.split() if len(word) > 2]
        if keywords and len(keywords[0]) > 3:
            results += [
                case for case in self.cases.values()
                if any(keywords[0] in (value or "").lower() for value in (case.case_name, case.client_name))
            ]

        unique = {}
        for case in results:
            unique.setdefault(case.id, case)
        return list(unique.values())

    async def get_by_id(self, case_id):
        if case_id not in self.cases:
            raise CaseNotFoundError(case_id)
        return self.cases[case_id]

    async def create(self, data, actor):
        case_number = data.get("case_number") or generate_case_number()
        missing_fields = data.get("missing_fields") or []
        status = data.get("status") or (CaseStatus.DRAFT.value if missing_fields else CaseStatus.ACTIVE.value)
        fields = {key: value for key, value in data.items() if key != "missing_fields"}
        fields.update(case_number=case_number, status=status, created_by=actor.name)
        case = self.add_case(**fields)
        self.created.append(case)
        return {
            "id": case.id,
            "case_number": case_number,
            "case_name": case.case_name,
            "status": status,
            "is_draft": status == CaseStatus.DRAFT.value,
            "missing_fields": missing_fields
        }

    async def update(self, case_id, patch, actor):
        self.updates.append((case_id, dict(patch)))
        case = self.cases[case_id]
        known = {key: value for key, value in patch.items() if key in CaseRecord.model_fields}
        self.cases[case_id] = case.model_copy(update=known)
        return {"id": case_id, **patch}

    async def close(self, case_id, actor):
        self.closed.append(case_id)
        await self.update(case_id, {"status": CaseStatus.CLOSED.value}, actor)

    async def add_hearing(self, case_id, hearing, actor):
        case = await self.get_by_id(case_id)
        hearing_number = case.hearing_count + 1
        self.hearings.append((case_id, hearing_number, hearing))
        self.cases[case_id] = case.model_copy(update={
            "hearing_count": hearing_number,
            "latest_outcome": hearing.outcome
        })
        return {"hearing_id": f"hearing-{hearing_number}", "hearing_number": hearing_number, "date": hearing.date, "outcome": hearing.outcome}

    async def append_history_note(self, case_id, text, actor):
        self.notes.append((case_id, text))


class FakeCalendar(CalendarService):
    """Calendar that records events instead of calling the API."""

    def __init__(self, configured=True):
        super().__init__(access_token="token" if configured else "", api_url="https://calendar.test", timezone="Asia/Kolkata")
        self.events = []

    async def _insert_event(self, actor, event, send_updates):
        self.events.append(event)
        return {
            "event_id": f"evt-{len(self.events)}",
            "html_link": f"https://calendar.test/evt-{len(self.events)}",
            "summary": event["summary"]
        }


class FakeNotifier(EmailService):
    """Email service that records messages instead of calling the relay."""

    def __init__(self, configured=True):
        super().__init__(relay_url="https://relay.test" if configured else "", from_address="noreply@firm.test")
        self.sent = []

    async def send(self, to, subject, body):
        if not self.is_available():
            return {"skipped": True, "reason": "Email not configured"}
        self.sent.append({"to": to, "subject": subject, "body": body})
        return {"success": True, "message_id": f"msg-{len(self.sent)}", "to": to}

    def sent_to(self, address):
        return [message for message in self.sent if message["to"] == address]


class FakeExtractor:
    """Extractor returning a canned result."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []
        self.summaries = []

    async def extract(self, transcript, actor):
        self.calls.append((transcript, actor))
        if self.error:
            raise self.error
        if isinstance(self.result, ExtractionResult):
            return self.result
        return ExtractionResult.model_validate(self.result or {"cases": []})

    async def generate_case_summary(self, payload):
        self.summaries.append(payload)
        return "Generated summary"

    def is_available(self):
        return True


@pytest.fixture
def store():
    return FakeCaseStore()


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def senior_actor():
    return ActorContext(
        id="user-senior",
        name="Adv. Kavita Rao",
        role=ActorRole.SENIOR,
        email="lawyer@firm.com",
        junior_name="Rahul Verma",
        junior_email="rahul.verma@firm.com"
    )


@pytest.fixture
def solo_senior_actor():
    return ActorContext(id="user-solo", name="Adv. Neel Shah", role=ActorRole.SENIOR, email="neel.shah@firm.com")


@pytest.fixture
def junior_actor():
    return ActorContext(
        id="user-junior",
        name="Rahul Verma",
        role=ActorRole.JUNIOR,
        email="rahul.verma@firm.com",
        junior_name="Someone Else",
        junior_email="someone.else@firm.com",
        preferences=ActorPreferences(auto_assign_to_junior=True)
    )
