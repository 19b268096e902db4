"""
Calendar service for court hearing events and document reminders.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..models import ActorContext
from ..utils.helpers import parse_date, parse_hearing_time
from .http_client import http_client_service

logger = logging.getLogger(__name__)

HEARING_DURATION_HOURS = 2
DOCUMENT_REMINDER_LEAD_DAYS = 3


class CalendarService:
    """
    Scheduler backed by the Google Calendar REST API.

    Works without configuration: when no access token is set every call
    returns a ``{"skipped": True}`` marker instead of creating an event.
    Calendar failures never propagate; they are logged and reported as None.
    """

    def __init__(self, access_token: Optional[str] = None, api_url: Optional[str] = None, timezone: Optional[str] = None):
        self.access_token = access_token if access_token is not None else settings.GOOGLE_CALENDAR_TOKEN
        self.api_url = (api_url or settings.CALENDAR_API_URL).rstrip("/")
        self.timezone = timezone or settings.CALENDAR_TIMEZONE

    def is_available(self) -> bool:
        """Check if the calendar is configured"""
        return bool(self.access_token)

    def _skipped(self, case_name: Optional[str]) -> Dict[str, Any]:
        logger.info(f"📅 Calendar not configured - skipping event for {case_name}")
        return {"skipped": True, "reason": "Calendar not configured"}

    async def create_hearing_event(self, details: Dict[str, Any], actor: ActorContext) -> Optional[Dict[str, Any]]:
        """
        Create a court hearing event on the actor's calendar.

        Args:
            details: case_name, date and optionally time, case_number, client_name,
                notes, documents_needed, court_location, include_junior, junior_email
            actor: Lawyer whose calendar receives the event

        Returns:
            Dict with event_id, html_link, summary and start; a skipped marker
            when unconfigured; None when the date is unparseable or the call fails
        """
        if not self.is_available():
            return self._skipped(details.get("case_name"))

        event_date = parse_date(details.get("date"))
        if not event_date:
            logger.warning(f"⚠️ Could not parse hearing date '{details.get('date')}' - event not created")
            return None

        hour, minute = parse_hearing_time(details.get("time"))
        start = datetime(event_date.year, event_date.month, event_date.day, hour, minute)
        end = start + timedelta(hours=HEARING_DURATION_HOURS)

        event = {
            "summary": f"[Court] {details.get('case_name')} Hearing",
            "description": self._build_event_description(details, actor),
            "start": {"dateTime": start.isoformat(), "timeZone": self.timezone},
            "end": {"dateTime": end.isoformat(), "timeZone": self.timezone},
            "location": details.get("court_location") or "Court",
            "attendees": self._build_attendees(details, actor),
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": actor.preferences.reminder_hours_before * 60},
                    {"method": "popup", "minutes": 60},
                    {"method": "popup", "minutes": 15}
                ]
            },
            "colorId": "11"
        }

        logger.info(f"📅 Creating hearing event for {details.get('case_name')} on {start.isoformat()}")
        result = await self._insert_event(actor, event, send_updates=True)
        if result:
            result["start"] = start.isoformat()
        return result

    async def create_document_reminder(self, details: Dict[str, Any], actor: ActorContext) -> Optional[Dict[str, Any]]:
        """Create a 30-minute document collection reminder three days out"""
        if not self.is_available():
            return self._skipped(details.get("case_name"))

        due = parse_date(details.get("due_date")) if details.get("due_date") else None
        reminder_day = due or (date.today() + timedelta(days=DOCUMENT_REMINDER_LEAD_DAYS))
        start = datetime(reminder_day.year, reminder_day.month, reminder_day.day, 9, 0)
        end = start + timedelta(minutes=30)

        event = {
            "summary": f"📄 [Documents] {details.get('case_name')}",
            "description": self._build_document_reminder_description(details, actor),
            "start": {"dateTime": start.isoformat(), "timeZone": self.timezone},
            "end": {"dateTime": end.isoformat(), "timeZone": self.timezone},
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": 24 * 60},
                    {"method": "popup", "minutes": 60}
                ]
            },
            "colorId": "5"
        }

        logger.info(f"📅 Creating document reminder for {details.get('case_name')}")
        return await self._insert_event(actor, event, send_updates=False)

    async def _insert_event(self, actor: ActorContext, event: Dict[str, Any], send_updates: bool) -> Optional[Dict[str, Any]]:
        url = f"{self.api_url}/calendars/{actor.google_calendar_id or 'primary'}/events"
        params = {"sendUpdates": "all"} if send_updates else None
        try:
            response = await http_client_service.client.post(
                url,
                json=event,
                params=params,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=30.0
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ Calendar API returned status {e.response.status_code}: {e.response.text[:200]}")
            return None
        except httpx.TimeoutException:
            logger.error("❌ Calendar request timed out")
            return None
        except httpx.RequestError as e:
            logger.error(f"❌ Calendar request failed: {str(e)}")
            return None
        except Exception as e:
            logger.error(f"❌ Calendar event creation failed: {str(e)}")
            return None

        logger.info(f"✅ Calendar event created: {data.get('id')}")
        return {
            "event_id": data.get("id"),
            "html_link": data.get("htmlLink"),
            "summary": data.get("summary")
        }

    def _build_event_description(self, details: Dict[str, Any], actor: ActorContext) -> str:
        lines = ["📋 Case Hearing Details", "", f"Case: {details.get('case_name')}"]
        if details.get("case_number"):
            lines.append(f"Case Number: {details['case_number']}")
        if details.get("client_name"):
            lines.append(f"Client: {details['client_name']}")
        lines += ["", f"Created by: {actor.name}"]
        if details.get("notes"):
            lines += ["", "Notes:", details["notes"]]
        documents: List[str] = details.get("documents_needed") or []
        if documents:
            lines += ["", "📄 Documents to Carry:"]
            lines += [f"• {doc}" for doc in documents]
        return "\n".join(lines)

    def _build_document_reminder_description(self, details: Dict[str, Any], actor: ActorContext) -> str:
        lines = ["📄 Document Collection Reminder", "", f"Case: {details.get('case_name')}", "", "Documents Required:"]
        lines += [f"• {doc}" for doc in details.get("documents") or []]
        if details.get("client_name"):
            lines.append(f"Client: {details['client_name']}")
        if details.get("client_email"):
            lines.append(f"Client Email: {details['client_email']}")
        lines += ["", f"Created by: {actor.name}"]
        return "\n".join(lines)

    def _build_attendees(self, details: Dict[str, Any], actor: ActorContext) -> List[Dict[str, str]]:
        attendees = []
        if actor.email:
            attendees.append({"email": actor.email})
        junior_email = details.get("junior_email") or actor.junior_email
        if details.get("include_junior") and junior_email:
            attendees.append({"email": junior_email})
        return attendees
