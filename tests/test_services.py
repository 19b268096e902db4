"""
Tests for the outbound services against a mocked HTTP transport.
"""

import asyncio
import json

import httpx
import pytest

from docket_agent.models import HearingRecord
from docket_agent.services.calendar_service import CalendarService
from docket_agent.services.case_store import BackendCaseStore
from docket_agent.services.email_service import EmailService
from docket_agent.services.http_client import http_client_service
from docket_agent.utils.errors import CaseNotFoundError, ExternalServiceError


class Recorder:
    """MockTransport handler recording requests and replying from a route table."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, suffix), reply in self.routes.items():
            if request.method == method and request.url.path.endswith(suffix):
                return reply(request) if callable(reply) else reply
        return httpx.Response(200, json={})

    def bodies(self, method=None):
        return [json.loads(request.content) for request in self.requests if method in (None, request.method) and request.content]


@pytest.fixture
def transport():
    recorder = Recorder()
    http_client_service._client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    yield recorder
    http_client_service._client = None


# =================================================================
# CALENDAR
# =================================================================

class TestCalendarService:

    def test_unconfigured_calendar_is_skipped(self, senior_actor):
        service = CalendarService(access_token="")
        result = asyncio.run(service.create_hearing_event({"case_name": "Gupta", "date": "2025-01-15"}, senior_actor))
        assert result == {"skipped": True, "reason": "Calendar not configured"}

    def test_hearing_event_defaults_to_morning_slot(self, transport, senior_actor):
        transport.routes[("POST", "/events")] = httpx.Response(200, json={"id": "evt-1", "htmlLink": "https://cal/evt-1", "summary": "x"})
        service = CalendarService(access_token="token", api_url="https://calendar.test", timezone="Asia/Kolkata")

        result = asyncio.run(service.create_hearing_event({
            "case_name": "Gupta Land Dispute",
            "case_number": "CASE-2025-GLD01",
            "date": "15/01/2025",
            "documents_needed": ["Land records"],
            "include_junior": True
        }, senior_actor))

        assert result["event_id"] == "evt-1"
        assert result["start"] == "2025-01-15T09:00:00"

        request = transport.requests[0]
        assert request.url.path == "/calendars/primary/events"
        assert request.url.params["sendUpdates"] == "all"
        assert request.headers["Authorization"] == "Bearer token"

        event = transport.bodies()[0]
        assert event["summary"] == "[Court] Gupta Land Dispute Hearing"
        assert event["end"]["dateTime"] == "2025-01-15T11:00:00"
        assert event["start"]["timeZone"] == "Asia/Kolkata"
        assert event["reminders"]["overrides"] == [
            {"method": "email", "minutes": 24 * 60},
            {"method": "popup", "minutes": 60},
            {"method": "popup", "minutes": 15}
        ]
        assert event["attendees"] == [{"email": "lawyer@firm.com"}, {"email": "rahul.verma@firm.com"}]
        assert "• Land records" in event["description"]

    def test_unparseable_date_creates_nothing(self, transport, senior_actor):
        service = CalendarService(access_token="token", api_url="https://calendar.test")
        result = asyncio.run(service.create_hearing_event({"case_name": "Gupta", "date": "after the vacations"}, senior_actor))
        assert result is None
        assert transport.requests == []

    def test_api_failure_returns_none(self, transport, senior_actor):
        transport.routes[("POST", "/events")] = httpx.Response(500, text="backend error")
        service = CalendarService(access_token="token", api_url="https://calendar.test")
        result = asyncio.run(service.create_document_reminder({"case_name": "Gupta", "documents": ["Deed"]}, senior_actor))
        assert result is None

    def test_non_json_reply_returns_none(self, transport, senior_actor):
        transport.routes[("POST", "/events")] = httpx.Response(200, text="OK")
        service = CalendarService(access_token="token", api_url="https://calendar.test")
        result = asyncio.run(service.create_hearing_event({"case_name": "Gupta", "date": "2025-01-15"}, senior_actor))
        assert result is None


# =================================================================
# EMAIL
# =================================================================

class TestEmailService:

    def test_unconfigured_relay_is_skipped(self):
        service = EmailService(relay_url="")
        result = asyncio.run(service.send("client@gmail.com", "Hello", "Body"))
        assert result["skipped"] is True

    def test_send_posts_to_relay(self, transport):
        transport.routes[("POST", "/send")] = httpx.Response(200, json={"message_id": "m-1"})
        service = EmailService(relay_url="https://relay.test/send", from_address="noreply@firm.test")

        result = asyncio.run(service.send("client@gmail.com", "Hello", "Body"))

        assert result == {"success": True, "message_id": "m-1", "to": "client@gmail.com"}
        assert transport.bodies()[0] == {"from": "noreply@firm.test", "to": "client@gmail.com", "subject": "Hello", "text": "Body"}

    def test_relay_error_is_reported(self, transport):
        transport.routes[("POST", "/send")] = httpx.Response(503)
        service = EmailService(relay_url="https://relay.test/send")

        result = asyncio.run(service.send("client@gmail.com", "Hello", "Body"))

        assert result["success"] is False
        assert "503" in result["error"]

    def test_plain_text_reply_still_counts_as_sent(self, transport):
        transport.routes[("POST", "/send")] = httpx.Response(200, text="Queued")
        service = EmailService(relay_url="https://relay.test/send")

        result = asyncio.run(service.send("client@gmail.com", "Hello", "Body"))

        assert result == {"success": True, "message_id": None, "to": "client@gmail.com"}

    def test_junior_assignment_needs_a_junior(self, solo_senior_actor, transport):
        service = EmailService(relay_url="https://relay.test/send")
        assert asyncio.run(service.send_junior_assignment({"case_name": "Gupta"}, solo_senior_actor)) is None
        assert transport.requests == []

    def test_hearing_report_content(self, senior_actor, transport):
        service = EmailService(relay_url="https://relay.test/send")
        asyncio.run(service.send_hearing_report({
            "case_name": "Rohan Sharma Bail Matter",
            "case_number": "CASE-2024-RS001",
            "client_name": "Rohan Sharma",
            "client_email": "rohan.sharma@gmail.com",
            "outcome": "Bail granted",
            "next_hearing_date": "2025-01-15",
            "documents_needed": ["Surety bond"]
        }, senior_actor, 3))

        message = transport.bodies()[0]
        assert message["subject"] == "📋 Hearing #3 Report - Rohan Sharma Bail Matter"
        assert "Rohan Sharma Bail Matter (Case No: CASE-2024-RS001)" in message["text"]
        assert "Next Hearing Date: 15 January 2025" in message["text"]
        assert "  • Surety bond" in message["text"]
        assert "Case Status: Continuing" in message["text"]

    def test_document_request_to_client(self, senior_actor, transport):
        service = EmailService(relay_url="https://relay.test/send")
        asyncio.run(service.send_document_request_to_client({
            "case_name": "Gupta Land Dispute",
            "client_name": "Rakesh Gupta",
            "client_email": "rakesh.gupta@gmail.com",
            "documents_needed": ["Land records"]
        }, senior_actor))

        message = transport.bodies()[0]
        assert message["to"] == "rakesh.gupta@gmail.com"
        assert message["subject"] == "📄 Documents Required - Gupta Land Dispute"
        assert "Please provide them as soon as possible." in message["text"]


# =================================================================
# CASE STORE
# =================================================================

class TestBackendCaseStore:

    def test_search_merges_keyword_results(self, transport):
        def reply(request):
            if request.url.params.get("fields"):
                return httpx.Response(200, json={"cases": [
                    {"id": "c1", "case_name": "Meera Reddy Custody"},
                    {"id": "c2", "case_name": "Meera Iyer Will", "documents_needed": "Deed, Will"}
                ]})
            return httpx.Response(200, json=[{"id": "c1", "case_name": "Meera Reddy Custody", "hearing_count": None}])

        transport.routes[("GET", "/api/cases")] = reply
        store = BackendCaseStore(backend_url="https://backend.test")

        results = asyncio.run(store.search("Meera custody"))

        assert [case.id for case in results] == ["c1", "c2"]
        assert results[0].hearing_count == 0
        assert results[1].documents_needed == ["Deed", "Will"]
        assert transport.requests[1].url.params["q"] == "meera"

    def test_short_keyword_is_not_searched_separately(self, transport):
        transport.routes[("GET", "/api/cases")] = httpx.Response(200, json=[])
        store = BackendCaseStore(backend_url="https://backend.test")
        asyncio.run(store.search("Raj"))
        assert len(transport.requests) == 1

    def test_missing_case(self, transport):
        transport.routes[("GET", "/api/cases/c404")] = httpx.Response(404)
        store = BackendCaseStore(backend_url="https://backend.test")
        with pytest.raises(CaseNotFoundError):
            asyncio.run(store.get_by_id("c404"))

    def test_backend_error(self, transport):
        transport.routes[("GET", "/api/cases")] = httpx.Response(500, text="boom")
        store = BackendCaseStore(backend_url="https://backend.test")
        with pytest.raises(ExternalServiceError):
            asyncio.run(store.search("Gupta"))

    def test_create_draft_notes_missing_fields(self, transport, senior_actor):
        transport.routes[("POST", "/api/cases")] = httpx.Response(201, json={"id": "c9"})
        store = BackendCaseStore(backend_url="https://backend.test")

        created = asyncio.run(store.create({
            "case_name": "Meera Reddy Custody",
            "client_name": "Meera Reddy",
            "client_email": None,
            "documents_needed": ["Birth certificate", "School records"],
            "missing_fields": ["client_email"]
        }, senior_actor))

        assert created["id"] == "c9"
        assert created["is_draft"] is True
        assert created["status"] == "Draft"

        case_body, *notes = transport.bodies("POST")
        assert "client_email" not in case_body
        assert "missing_fields" not in case_body
        assert case_body["documents_needed"] == "Birth certificate, School records"
        assert case_body["created_by"] == "Adv. Kavita Rao"
        assert [note["text"] for note in notes] == [
            "Case created by Adv. Kavita Rao",
            "⚠️ Missing information: client_email"
        ]

    def test_add_hearing_bumps_count(self, transport, senior_actor):
        transport.routes[("GET", "/api/cases/c1")] = httpx.Response(200, json={"id": "c1", "case_name": "Gupta", "hearing_count": 2})
        transport.routes[("POST", "/hearings")] = httpx.Response(200, json={"id": "h3"})
        store = BackendCaseStore(backend_url="https://backend.test")

        result = asyncio.run(store.add_hearing(
            "c1",
            HearingRecord(date="2025-01-10", outcome="Adjourned", next_hearing_date="2025-02-01"),
            senior_actor
        ))

        assert result["hearing_number"] == 3
        assert result["hearing_id"] == "h3"
        patch = transport.bodies("PATCH")[0]
        assert patch["hearing_count"] == 3
        assert patch["next_hearing"] == "2025-02-01"
        assert patch["updated_by"] == "Adv. Kavita Rao"

    def test_history_note_failure_is_not_raised(self, transport, senior_actor):
        transport.routes[("POST", "/notes")] = httpx.Response(500)
        store = BackendCaseStore(backend_url="https://backend.test")
        asyncio.run(store.append_history_note("c1", "note", senior_actor))
