"""
Email service for client and junior notifications sent through the HTTP email relay.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..models import ActorContext, CaseStatus
from ..utils.helpers import format_date, truncate_email
from .http_client import http_client_service

logger = logging.getLogger(__name__)


def _bullets(items: List[str]) -> List[str]:
    return [f"  • {item}" for item in items]


class EmailService:
    """Service for sending case notifications through the email relay."""

    def __init__(self, relay_url: Optional[str] = None, from_address: Optional[str] = None):
        self.relay_url = relay_url if relay_url is not None else settings.EMAIL_SERVICE_URL
        self.from_address = from_address or settings.EMAIL_FROM

    def is_available(self) -> bool:
        """Check if the email relay is configured"""
        return bool(self.relay_url)

    async def send(self, to: str, subject: str, body: str) -> Dict[str, Any]:
        """
        Send one email through the relay.

        Args:
            to: Recipient address
            subject: Subject line
            body: Plain-text body

        Returns:
            Dict with success status, or a skipped marker when the relay is not configured
        """
        if not self.is_available():
            logger.info(f"📧 Email relay not configured - skipping email to {truncate_email(to)}")
            return {"skipped": True, "reason": "Email not configured"}

        request_data = {
            "from": self.from_address,
            "to": to,
            "subject": subject,
            "text": body
        }

        try:
            response = await http_client_service.client.post(self.relay_url, json=request_data, timeout=30.0)
            if response.status_code >= 400:
                error_msg = f"Email relay returned status {response.status_code}"
                logger.error(f"❌ Email to {truncate_email(to)} failed: {error_msg}")
                return {"success": False, "error": error_msg, "to": to}

            message_id = None
            if response.content:
                try:
                    message_id = response.json().get("message_id")
                except ValueError:
                    logger.warning(f"⚠️ Email relay reply was not JSON: {response.text[:100]}")
            logger.info(f"📧 Email sent to {truncate_email(to)}: {subject}")
            return {"success": True, "message_id": message_id, "to": to}

        except httpx.TimeoutException:
            error_msg = "Email relay request timed out"
            logger.error(f"❌ {error_msg}")
            return {"success": False, "error": error_msg, "to": to}

        except httpx.RequestError as e:
            error_msg = f"Email relay request failed: {str(e)}"
            logger.error(f"❌ {error_msg}")
            return {"success": False, "error": error_msg, "to": to}

        except Exception as e:
            error_msg = f"Email relay call failed: {str(e)}"
            logger.error(f"❌ {error_msg}")
            return {"success": False, "error": error_msg, "to": to}

    # =================================================================
    # JUNIOR NOTIFICATIONS
    # =================================================================

    async def send_junior_assignment(self, case_data: Dict[str, Any], actor: ActorContext) -> Optional[Dict[str, Any]]:
        """Tell the junior a case has been assigned to them"""
        junior_email = case_data.get("junior_email") or actor.junior_email
        if not junior_email:
            logger.warning("⚠️ No junior email available - assignment email not sent")
            return None

        junior_name = case_data.get("junior_name") or actor.junior_name
        lines = [
            f"Hello {junior_name}," if junior_name else "Hello,",
            "",
            "A new case has been assigned to you.",
            "",
            f"Case Name: {case_data.get('case_name')}"
        ]
        if case_data.get("case_number"):
            lines.append(f"Case Number: {case_data['case_number']}")
        if case_data.get("client_name"):
            lines.append(f"Client: {case_data['client_name']}")
        if case_data.get("client_email"):
            lines.append(f"Client Email: {case_data['client_email']}")
        if case_data.get("case_summary"):
            lines += ["", "Case Summary:", case_data["case_summary"]]
        if case_data.get("documents_needed"):
            lines += ["", "Documents Required:"] + _bullets(case_data["documents_needed"])
            lines.append("Please collect these documents from the client at the earliest.")
        if case_data.get("next_hearing_date"):
            lines += ["", f"Next Hearing: {format_date(case_data['next_hearing_date'])}"]
        lines += ["", f"Assigned by: {actor.name}", f"Date: {datetime.now().strftime('%d/%m/%Y')}"]

        return await self.send(
            junior_email,
            f"📋 New Case Assignment: {case_data.get('case_name')}",
            "\n".join(lines)
        )

    async def send_document_request_to_junior(self, case_data: Dict[str, Any], actor: ActorContext) -> Optional[Dict[str, Any]]:
        """Ask the junior to collect the documents the court requested"""
        junior_email = case_data.get("junior_email") or actor.junior_email
        if not junior_email:
            logger.warning("⚠️ No junior email available - document request not sent")
            return None

        lines = [
            f"Documents are needed for {case_data.get('case_name')}.",
            ""
        ]
        if case_data.get("client_name"):
            lines.append(f"Client: {case_data['client_name']}")
        if case_data.get("client_email"):
            lines.append(f"Client Email: {case_data['client_email']}")
        lines += ["", "Documents to collect:"] + _bullets(case_data.get("documents_needed") or [])
        if case_data.get("next_hearing_date"):
            lines += ["", f"These are required before the hearing on {format_date(case_data['next_hearing_date'])}."]
        lines += ["", f"Requested by: {actor.name}"]

        return await self.send(
            junior_email,
            f"🔴 URGENT: Document Collection Required - {case_data.get('case_name')}",
            "\n".join(lines)
        )

    # =================================================================
    # CLIENT NOTIFICATIONS
    # =================================================================

    async def send_document_request_to_client(self, case_data: Dict[str, Any], actor: ActorContext) -> Optional[Dict[str, Any]]:
        """Ask the client for the documents the court requested"""
        client_email = case_data.get("client_email")
        if not client_email:
            logger.warning("⚠️ No client email - document request not sent")
            return None

        lines = [
            f"Dear {case_data.get('client_name') or 'Client'},",
            "",
            f"The court has requested the following documents for your case {case_data.get('case_name')}:",
            ""
        ]
        lines += _bullets(case_data.get("documents_needed") or [])
        if case_data.get("next_hearing_date"):
            lines += ["", f"Please provide them before the next hearing on {format_date(case_data['next_hearing_date'])}."]
        else:
            lines += ["", "Please provide them as soon as possible."]
        lines += ["", "Warm regards,", actor.name]

        return await self.send(
            client_email,
            f"📄 Documents Required - {case_data.get('case_name')}",
            "\n".join(lines)
        )

    async def send_client_update(self, case_data: Dict[str, Any], actor: ActorContext) -> Optional[Dict[str, Any]]:
        """Send the client a status update, used when a case is finalized"""
        client_email = case_data.get("client_email")
        if not client_email:
            logger.warning("⚠️ No client email - case update not sent")
            return None

        lines = [
            f"Dear {case_data.get('client_name') or 'Client'},",
            "",
            f"There is an update on your case {case_data.get('case_name')}.",
            "",
            f"Status: {case_data.get('status') or CaseStatus.ACTIVE.value}"
        ]
        if case_data.get("outcome"):
            lines += ["", "Latest Update:", case_data["outcome"]]
        if case_data.get("next_hearing_date"):
            lines += ["", f"Next Hearing: {format_date(case_data['next_hearing_date'])}"]
        lines += ["", "Warm regards,", actor.name]

        return await self.send(
            client_email,
            f"Case Update: {case_data.get('case_name')}",
            "\n".join(lines)
        )

    async def send_hearing_report(self, case_data: Dict[str, Any], actor: ActorContext, hearing_number: int) -> Optional[Dict[str, Any]]:
        """Report the outcome of a hearing to the client"""
        client_email = case_data.get("client_email")
        if not client_email:
            logger.warning("⚠️ No client email - hearing report not sent")
            return None

        status = case_data.get("status") or CaseStatus.CONTINUING.value
        case_ref = case_data.get("case_name")
        if case_data.get("case_number"):
            case_ref = f"{case_ref} (Case No: {case_data['case_number']})"

        lines = [
            f"Dear {case_data.get('client_name') or 'Client'},",
            "",
            f"Here is the report of today's court hearing for your case {case_ref}.",
            "",
            f"Hearing Date: {datetime.now().strftime('%A, %d %B %Y')}",
            f"Hearing Number: #{hearing_number}",
            f"Case Status: {status}",
            "",
            "What happened in court today:",
            case_data.get("outcome") or "The hearing was conducted. Details will be shared in the next update."
        ]
        if case_data.get("next_hearing_date"):
            lines += [
                "",
                f"Next Hearing Date: {format_date(case_data['next_hearing_date'])}",
                "Please mark this date in your calendar."
            ]
        if case_data.get("documents_needed"):
            lines += ["", "Documents required from you:"] + _bullets(case_data["documents_needed"])
        if status == CaseStatus.FINALIZED.value:
            lines += ["", "Your case has been concluded. Thank you for trusting us with your legal matters."]
        lines += ["", "Warm regards,", actor.name, "Legal Counsel"]

        return await self.send(
            client_email,
            f"📋 Hearing #{hearing_number} Report - {case_data.get('case_name')}",
            "\n".join(lines)
        )

