"""
Workflow orchestrator turning a voice-note transcript into case store actions.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from ..config import get_record_url
from ..models import (
    ActionType,
    ActorContext,
    ActorRole,
    CaseRecord,
    CaseResult,
    CaseStatus,
    ExistingCaseRef,
    ExtractedCasePayload,
    HearingRecord,
    MatchCandidate,
    ResultStatus,
    RunStatus,
    WorkflowResult
)
from ..utils.errors import AmbiguousCaseError, CaseAlreadyExistsError, CaseNotFoundError
from .actor import normalize_actor
from .duplicates import UNKNOWN_CASE_PREFIX, DuplicateDetector
from .email_policy import resolve_client_email
from .matcher import CaseMatcher
from .operation_log import OperationLog

logger = logging.getLogger(__name__)

REQUIRED_NEW_CASE_FIELDS = ["case_name", "client_name", "client_email"]
UNKNOWN_CASE_MISSING_FIELDS = ["case_verification", "client_name", "client_email"]

STATUS_MAP = {
    "CONTINUING": CaseStatus.CONTINUING,
    "FINALIZED": CaseStatus.FINALIZED,
    "DRAFT": CaseStatus.DRAFT,
    "ACTIVE": CaseStatus.ACTIVE
}


def map_status(status: Optional[str]) -> CaseStatus:
    """Map an extracted status onto the store vocabulary; unknown values become ACTIVE"""
    return STATUS_MAP.get((status or "").strip().upper(), CaseStatus.ACTIVE)


def _is_created(result: Optional[Dict[str, Any]]) -> bool:
    return bool(result) and not result.get("skipped") and result.get("success", True) is not False


class WorkflowOrchestrator:
    """
    Coordinates extraction, case resolution and side effects for one lawyer.

    Collaborators are injected:
        store: case store (search, get_by_id, create, update, close,
            add_hearing, append_history_note)
        scheduler: calendar (create_hearing_event, create_document_reminder)
        notifier: email templates and send
        extractor: entity extractor (extract, generate_case_summary)

    Payloads in one run are processed sequentially and independently. A
    failure in one payload becomes an ERROR result for that payload only,
    and side effects already applied are not rolled back.
    """

    def __init__(self, actor: ActorContext, store, scheduler, notifier, extractor):
        self.actor = normalize_actor(actor)
        self.store = store
        self.scheduler = scheduler
        self.notifier = notifier
        self.extractor = extractor
        self.matcher = CaseMatcher(store)
        self.duplicates = DuplicateDetector(store)
        self.operation_log = OperationLog(user=self.actor.name)

    def log(self, op_type: str, message: str) -> None:
        self.operation_log.log(op_type, message)

    # =================================================================
    # WHOLE RUN
    # =================================================================

    async def process_voice_note(self, transcript: str) -> WorkflowResult:
        """
        Process one transcript end to end.

        Args:
            transcript: Transcribed voice note

        Returns:
            WorkflowResult with one CaseResult per extracted payload and the operation log
        """
        logger.info(f"🗣️ Processing voice note for {self.actor.id} ({len(transcript or '')} chars)")

        try:
            if not transcript or not transcript.strip():
                raise ValueError("No transcription provided")
            self.log("TRANSCRIPTION", "Voice note transcription received")

            extraction = await self.extractor.extract(transcript, self.actor)
            self.log("AI_EXTRACTION", f"Extracted {len(extraction.cases)} case(s)")

            if extraction.requires_clarification:
                return WorkflowResult(
                    success=True,
                    status=RunStatus.CLARIFICATION_NEEDED,
                    message=extraction.clarification_message,
                    cases_found=len(extraction.cases),
                    operations=self.operation_log.entries
                )

            results = []
            for payload in extraction.cases:
                results.append(await self.process_single_case(payload))

            return WorkflowResult(
                success=True,
                status=RunStatus.COMPLETED,
                summary=extraction.overall_summary,
                cases_processed=len(results),
                cases=results,
                operations=self.operation_log.entries
            )

        except Exception as e:
            logger.error(f"❌ Voice note processing failed: {str(e)}")
            self.log("ERROR", str(e))
            return WorkflowResult(
                success=False,
                status=RunStatus.ERROR,
                error=str(e),
                operations=self.operation_log.entries
            )

    # =================================================================
    # ROUTER
    # =================================================================

    async def process_single_case(self, payload: ExtractedCasePayload) -> CaseResult:
        """Dispatch one payload on its action type"""
        logger.info(f"📋 Processing case payload: action={payload.action_type}, reference={payload.reference}")

        try:
            if payload.action_type == ActionType.UPDATE_EXISTING.value:
                return await self.handle_existing_case(payload)

            if payload.action_type == ActionType.CREATE_NEW.value:
                return await self.handle_new_case(payload)

            if payload.action_type == ActionType.CLARIFICATION_NEEDED.value:
                return CaseResult(
                    status=ResultStatus.CLARIFICATION_NEEDED,
                    case_name=payload.reference,
                    message="Could not determine if this is a new or existing case"
                )

            return CaseResult(status=ResultStatus.UNKNOWN_ACTION, case_name=payload.case_name)

        except Exception as e:
            logger.error(f"❌ Failed to process case '{payload.reference}': {str(e)}")
            self.log("ERROR", f"Failed to process case {payload.reference}: {str(e)}")
            return CaseResult(status=ResultStatus.ERROR, case_name=payload.reference, error=str(e))

    # =================================================================
    # UPDATE BRANCH
    # =================================================================

    async def _locate_case(self, lookup_key: str, payload: ExtractedCasePayload):
        """Return a CaseRecord, or a CaseResult when the branch ends early."""
        try:
            case = await self.matcher.find_case(lookup_key)
            self.log("CASE_SEARCH", f"Found case: {case.case_name}")
            return case
        except CaseNotFoundError:
            self.log("CASE_NOT_FOUND", f"Case \"{lookup_key}\" not found, creating draft")
            return await self.create_draft_from_unknown(payload, lookup_key)
        except AmbiguousCaseError as e:
            real_cases = [
                match for match in e.matches
                if not (match.get("case_name") or "").startswith(UNKNOWN_CASE_PREFIX)
            ]

            if len(real_cases) == 1:
                case = await self.store.get_by_id(real_cases[0]["id"])
                self.log("CASE_SEARCH", f"Found case after filtering placeholders: {case.case_name}")
                return case

            if not real_cases:
                self.log("CASE_NOT_FOUND", f"Only placeholder cases found for \"{lookup_key}\", creating draft")
                return await self.create_draft_from_unknown(payload, lookup_key)

            self.log("DUPLICATE_CASES", f"Multiple cases found for \"{lookup_key}\"")
            numbers = ", ".join(match.get("case_number") or match["id"] for match in real_cases)
            return CaseResult(
                status=ResultStatus.CLARIFICATION_NEEDED,
                case_name=lookup_key,
                message=f"Found {len(real_cases)} cases matching \"{lookup_key}\": {numbers}. Please specify the case number.",
                matches=[MatchCandidate(**match) for match in real_cases]
            )

    async def handle_existing_case(self, payload: ExtractedCasePayload) -> CaseResult:
        """
        Apply a voice-note update to an existing case.

        Steps run in order: locate, record hearing, patch fields, status
        actions, schedule next hearing, document requests, client report.
        """
        lookup_key = payload.reference
        if not lookup_key:
            return CaseResult(
                status=ResultStatus.CLARIFICATION_NEEDED,
                message="No case name or number was given for this update"
            )

        located = await self._locate_case(lookup_key, payload)
        if isinstance(located, CaseResult):
            return located
        case: CaseRecord = located

        # Recording hearing
        hearing_result = None
        if payload.outcome:
            hearing = HearingRecord(
                date=date.today().isoformat(),
                description=payload.raw_notes or payload.outcome,
                outcome=payload.outcome,
                next_steps=f"Next hearing: {payload.next_hearing_date}" if payload.next_hearing_date else "",
                documents=payload.documents_needed,
                next_hearing_date=payload.next_hearing_date
            )
            hearing_result = await self.store.add_hearing(case.id, hearing, self.actor)
            self.log("HEARING_ADDED", f"Added hearing {hearing_result['hearing_number']} to case")

        # Applying updates
        is_closed = case.status == CaseStatus.CLOSED.value
        is_senior_assignment = self.actor.role == ActorRole.SENIOR and payload.assign_to_junior
        updates = self._build_update_patch(case, payload)
        if is_senior_assignment:
            updates["junior_name"] = payload.junior_name or self.actor.junior_name
            updates["junior_email"] = payload.junior_email or self.actor.junior_email
            case_data = self._merge_case_data(case, payload)
            case_data.update(junior_name=updates["junior_name"], junior_email=updates["junior_email"])
            await self.notifier.send_junior_assignment(case_data, self.actor)
            self.log("JUNIOR_EMAIL", "Sent assignment email to junior")

        if updates:
            await self.store.update(case.id, updates, self.actor)
            self.log("CASE_UPDATE", f"Updated case: {case.case_name} (fields: {', '.join(updates.keys())})")
        else:
            self.log("CASE_UPDATE", f"No field changes for case: {case.case_name}")

        result = CaseResult(
            status=ResultStatus.UPDATED,
            case_id=case.id,
            record_url=get_record_url(case.id),
            case_name=case.case_name,
            case_number=case.case_number,
            outcome=payload.outcome,
            hearing_number=hearing_result["hearing_number"] if hearing_result else None,
            next_date=payload.next_hearing_date
        )

        # Status actions
        finalized = not is_closed and bool(payload.status) and map_status(payload.status) == CaseStatus.FINALIZED
        if finalized:
            await self.store.close(case.id, self.actor)
            self.log("CASE_CLOSED", f"Case finalized: {case.case_name}")
            result.actions.append("Case closed")

            if case.client_email:
                case_data = self._merge_case_data(case, payload)
                case_data["status"] = CaseStatus.FINALIZED.value
                await self.notifier.send_client_update(case_data, self.actor)
                result.actions.append("Client notified of case conclusion")

        # Scheduling
        if payload.next_hearing_date:
            event = await self.scheduler.create_hearing_event({
                "case_name": case.case_name,
                "case_number": case.case_number,
                "date": payload.next_hearing_date,
                "time": payload.next_hearing_time,
                "client_name": case.client_name,
                "documents_needed": payload.documents_needed,
                "include_junior": is_senior_assignment,
                "junior_email": updates.get("junior_email")
            }, self.actor)

            if _is_created(event):
                self.log("CALENDAR_EVENT", f"Created hearing reminder for {payload.next_hearing_date}")
                result.actions.append("Calendar reminder set")
                result.calendar_event = event

        # Document handling
        if payload.documents_needed:
            await self.handle_document_request(case, payload)
            result.actions.append("Document request processed")

        # Notifying
        resolved_email = resolve_client_email(case.client_email or payload.client_email, self.actor, "hearing update")
        if hearing_result and resolved_email:
            hearing_number = hearing_result["hearing_number"]
            case_data = self._merge_case_data(case, payload)
            case_data.update(
                client_email=resolved_email,
                documents_needed=payload.documents_needed,
                status=CaseStatus.FINALIZED.value if finalized else (CaseStatus.CLOSED.value if is_closed else CaseStatus.CONTINUING.value)
            )
            email_result = await self.notifier.send_hearing_report(case_data, self.actor, hearing_number)

            if _is_created(email_result):
                self.log("CLIENT_EMAIL", f"Sent hearing #{hearing_number} report to client")
                result.actions.append(f"Hearing #{hearing_number} report sent to client")
                result.email_sent = True
                result.email_to = resolved_email

            if hearing_number == 1 and not case.client_welcome_sent:
                await self.store.update(case.id, {"client_welcome_sent": True}, self.actor)

        return result

    def _build_update_patch(self, case: CaseRecord, payload: ExtractedCasePayload) -> Dict[str, Any]:
        updates: Dict[str, Any] = {}
        # Closing is irreversible through voice notes
        if payload.status and case.status != CaseStatus.CLOSED.value:
            updates["status"] = map_status(payload.status).value
        if payload.next_hearing_date:
            updates["next_hearing"] = payload.next_hearing_date
        if payload.documents_needed:
            updates["documents_needed"] = payload.documents_needed
        if payload.client_email:
            updates["client_email"] = payload.client_email
        if payload.client_name:
            updates["client_name"] = payload.client_name
        if payload.client_phone:
            updates["client_phone"] = payload.client_phone
        if payload.case_summary:
            updates["summary"] = payload.case_summary
        if payload.outcome:
            updates["latest_outcome"] = payload.outcome
        if payload.case_number and not case.case_number:
            updates["case_number"] = payload.case_number
        return updates

    @staticmethod
    def _merge_case_data(case: Optional[CaseRecord], payload: ExtractedCasePayload) -> Dict[str, Any]:
        """Case record fields overlaid with the non-empty payload fields, for email templates"""
        case_data: Dict[str, Any] = case.model_dump() if case else {}
        if case and case.summary:
            case_data["case_summary"] = case.summary
        for key, value in payload.model_dump(exclude={"action_type", "confidence", "lookup_key"}).items():
            if value not in (None, [], False):
                case_data[key] = value
        if case:
            # The stored name and number identify the case in every message
            case_data["case_name"] = case.case_name or case_data.get("case_name")
            case_data["case_number"] = case.case_number or case_data.get("case_number")
        return case_data

    async def create_draft_from_unknown(self, payload: ExtractedCasePayload, lookup_key: str) -> CaseResult:
        """Persist a placeholder draft for a reference that matched no case"""
        draft_name = f"{UNKNOWN_CASE_PREFIX}: {lookup_key}"
        created = await self.store.create({
            "case_name": draft_name,
            "summary": payload.outcome or payload.raw_notes,
            "status": CaseStatus.DRAFT.value,
            "missing_fields": list(UNKNOWN_CASE_MISSING_FIELDS),
            "assigned_to": self.actor.name
        }, self.actor)

        await self.store.append_history_note(
            created["id"],
            f"⚠️ This case was auto-created because \"{lookup_key}\" was not found. Please verify and update case details.",
            self.actor
        )
        self.log("CASE_CREATE", f"Created draft case: {draft_name}")

        return CaseResult(
            status=ResultStatus.CREATED_AS_DRAFT,
            case_id=created["id"],
            record_url=get_record_url(created["id"]),
            case_name=draft_name,
            case_number=created.get("case_number"),
            is_draft=True,
            missing_fields=list(UNKNOWN_CASE_MISSING_FIELDS),
            message=f"Case \"{lookup_key}\" not found. Created draft for review.",
            actions=["Created draft case for unknown reference"]
        )

    # =================================================================
    # CREATE BRANCH
    # =================================================================

    def _missing_fields(self, payload: ExtractedCasePayload) -> List[str]:
        missing = [field for field in REQUIRED_NEW_CASE_FIELDS if not getattr(payload, field)]
        if self.actor.role == ActorRole.SENIOR and payload.assign_to_junior:
            if not payload.junior_email and not self.actor.junior_email:
                missing.append("junior_email")
        for field in payload.missing_fields:
            if field not in missing:
                missing.append(field)
        return missing

    async def handle_new_case(self, payload: ExtractedCasePayload) -> CaseResult:
        """
        Create a case from a voice note.

        Incomplete cases are saved as drafts with no notifications. A case
        that duplicates an existing one is reported and never created.
        """
        missing_fields = self._missing_fields(payload)

        summary = payload.case_summary
        if not summary and payload.raw_notes:
            summary = await self.extractor.generate_case_summary(payload)

        try:
            await self.duplicates.ensure_no_duplicate(payload.case_name, payload.client_name)
        except CaseAlreadyExistsError as e:
            return self._duplicate_result(payload, e)

        is_senior_assignment = self.actor.role == ActorRole.SENIOR and payload.assign_to_junior
        junior_name = (payload.junior_name or self.actor.junior_name) if is_senior_assignment else None
        junior_email = (payload.junior_email or self.actor.junior_email) if is_senior_assignment else None

        created = await self.store.create({
            "case_name": payload.case_name,
            "case_number": payload.case_number,
            "client_name": payload.client_name,
            "client_email": payload.client_email,
            "client_phone": payload.client_phone,
            "summary": summary,
            "junior_name": junior_name,
            "junior_email": junior_email,
            "documents_needed": payload.documents_needed,
            "next_hearing": payload.next_hearing_date,
            "assigned_to": junior_name or self.actor.name,
            "status": CaseStatus.DRAFT.value if missing_fields else CaseStatus.ACTIVE.value,
            "missing_fields": missing_fields
        }, self.actor)

        is_draft = bool(created.get("is_draft"))
        self.log("CASE_CREATE", f"Created case: {payload.case_name} ({'Draft' if is_draft else 'Active'})")

        result = CaseResult(
            status=ResultStatus.CREATED_AS_DRAFT if is_draft else ResultStatus.CREATED,
            case_id=created["id"],
            record_url=get_record_url(created["id"]),
            case_name=payload.case_name,
            case_number=created.get("case_number"),
            is_draft=is_draft,
            missing_fields=missing_fields
        )

        if is_draft:
            result.message = f"Case created as draft. Missing: {', '.join(missing_fields)}. Please provide these details."
            result.actions.append("Created as draft - awaiting complete information")
            return result

        case_data = self._merge_case_data(None, payload)
        case_data.update(case_number=created.get("case_number"), case_summary=summary)
        if junior_name or junior_email:
            case_data.update(junior_name=junior_name, junior_email=junior_email)

        if self.actor.role == ActorRole.SENIOR and payload.assign_to_junior:
            await self.notifier.send_junior_assignment(case_data, self.actor)
            self.log("JUNIOR_EMAIL", "Sent assignment email to junior")
            result.actions.append("Junior notified of assignment")
        elif self.actor.role == ActorRole.SENIOR and self.actor.preferences.auto_assign_to_junior:
            await self.notifier.send_junior_assignment(case_data, self.actor)
            self.log("JUNIOR_EMAIL", "Auto-assigned to junior")
            result.actions.append("Auto-assigned to junior")

        if payload.documents_needed:
            await self.handle_document_request(None, payload, case_number=created.get("case_number"), notify_client=False)
            result.actions.append("Document collection requested")

        if payload.next_hearing_date:
            event = await self.scheduler.create_hearing_event({
                "case_name": payload.case_name,
                "case_number": created.get("case_number"),
                "date": payload.next_hearing_date,
                "time": payload.next_hearing_time,
                "client_name": payload.client_name,
                "documents_needed": payload.documents_needed,
                "include_junior": payload.assign_to_junior,
                "junior_email": junior_email
            }, self.actor)

            if _is_created(event):
                self.log("CALENDAR_EVENT", f"Created first hearing event for {payload.next_hearing_date}")
                result.actions.append("First hearing calendar event created")
                result.calendar_event = event

        result.actions.append("Client email held until first hearing")
        return result

    def _duplicate_result(self, payload: ExtractedCasePayload, error: CaseAlreadyExistsError) -> CaseResult:
        existing = error.existing_case
        logger.warning(f"⚠️ Duplicate case: '{payload.case_name}' matches existing '{existing.get('case_name')}'")
        self.log("DUPLICATE_CASE", f"Case already exists: {existing.get('case_name')}")
        return CaseResult(
            status=ResultStatus.DUPLICATE_CASE,
            case_name=payload.case_name,
            existing_case=ExistingCaseRef(
                id=existing.get("id"),
                case_name=existing.get("case_name"),
                case_number=existing.get("case_number"),
                record_url=get_record_url(existing.get("id"))
            ),
            message=error.message,
            suggestion="Please update the existing case instead of creating a new one."
        )

    # =================================================================
    # DOCUMENT REQUESTS
    # =================================================================

    async def handle_document_request(
        self,
        case: Optional[CaseRecord],
        payload: ExtractedCasePayload,
        case_number: Optional[str] = None,
        notify_client: bool = True
    ) -> None:
        """
        Schedule a document reminder and ask the client, and the junior
        when the senior has one, for the requested documents.

        New cases pass notify_client=False: clients are not emailed at intake.
        """
        if not payload.documents_needed:
            return

        case_data = {
            "case_name": (case.case_name if case else None) or payload.case_name,
            "case_number": (case.case_number if case else None) or payload.case_number or case_number,
            "documents_needed": payload.documents_needed,
            "documents": payload.documents_needed,
            "client_name": (case.client_name if case else None) or payload.client_name,
            "client_email": (case.client_email if case else None) or payload.client_email,
            "next_hearing_date": payload.next_hearing_date
        }

        reminder = await self.scheduler.create_document_reminder(case_data, self.actor)
        if _is_created(reminder):
            self.log("CALENDAR_EVENT", "Created document collection reminder")

        if notify_client and case_data["client_email"]:
            await self.notifier.send_document_request_to_client(case_data, self.actor)
            self.log("CLIENT_EMAIL", "Sent document request to client")

        if self.actor.role == ActorRole.SENIOR and self.actor.junior_email:
            await self.notifier.send_document_request_to_junior(case_data, self.actor)
            self.log("JUNIOR_EMAIL", "Sent document collection request to junior")
