"""
Case store service backed by the case records API.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from ..models import ActorContext, CaseRecord, CaseStatus, HearingRecord
from ..utils.errors import CaseNotFoundError, ExternalServiceError
from ..utils.helpers import generate_case_number
from .http_client import http_client_service

logger = logging.getLogger(__name__)


def _log_api_error(operation: str, url: str, request_data: Optional[Dict] = None, response: Optional[httpx.Response] = None, exception: Optional[Exception] = None):
    """Enhanced error logging for case store operations"""
    error_context = {
        "operation": operation,
        "url": url,
        "timestamp": datetime.now().isoformat()
    }

    if request_data:
        error_context["request_data"] = request_data

    if response is not None:
        error_context.update({
            "status_code": response.status_code,
            "response_text": response.text[:1000] if response.text else None
        })

    if exception:
        error_context["exception_type"] = type(exception).__name__
        error_context["exception_message"] = str(exception)

    logger.error(f"🚨 Case Store API Error - {operation}")
    logger.error(f"Error Details: {json.dumps(error_context, indent=2, default=str)}")


class BackendCaseStore:
    """
    Case store over the backend case records API.

    Records are always read fresh from the backend; nothing is cached
    between calls, so concurrent writers follow last-write-wins.
    """

    def __init__(self, backend_url: Optional[str] = None):
        self.backend_url = (backend_url or settings.BACKEND_URL or "").rstrip("/")

    def is_available(self) -> bool:
        return bool(self.backend_url)

    def _cases_url(self, *parts: str) -> str:
        return "/".join([f"{self.backend_url}/api/cases", *parts])

    async def _query(self, params: Dict[str, str]) -> List[Dict[str, Any]]:
        url = self._cases_url()
        try:
            response = await http_client_service.client.get(
                url,
                params=params,
                headers=http_client_service.get_auth_headers()
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            _log_api_error("search_cases", url, request_data=params, response=e.response, exception=e)
            raise ExternalServiceError("Case store", str(e))
        except Exception as e:
            _log_api_error("search_cases", url, request_data=params, exception=e)
            raise ExternalServiceError("Case store", str(e))

        if isinstance(result, dict):
            return result.get("cases", [])
        return result

    async def search(self, query: str) -> List[CaseRecord]:
        """
        Search cases by case name, case number or client name.

        Besides the full query, the first keyword of the query is searched
        against case and client names when it is longer than three
        characters, which catches first-name-only references.

        Args:
            query: Free-text lookup key

        Returns:
            Matching cases deduplicated by id, in search order
        """
        logger.info(f"🔍 Searching cases for '{query}'")
        keywords = [word for word in query.lower().split() if len(word) > 2]

        results = await self._query({"q": query})
        if keywords and len(keywords[0]) > 3:
            results += await self._query({"q": keywords[0], "fields": "case_name,client_name"})

        unique: Dict[str, CaseRecord] = {}
        for item in results:
            record = CaseRecord.model_validate(item)
            unique.setdefault(record.id, record)

        logger.info(f"🔍 Found {len(unique)} case(s) for '{query}'")
        return list(unique.values())

    async def get_by_id(self, case_id: str) -> CaseRecord:
        """Fetch one case by id"""
        url = self._cases_url(case_id)
        try:
            response = await http_client_service.client.get(url, headers=http_client_service.get_auth_headers())
            if response.status_code == 404:
                raise CaseNotFoundError(case_id)
            response.raise_for_status()
            return CaseRecord.model_validate(response.json())
        except CaseNotFoundError:
            raise
        except httpx.HTTPStatusError as e:
            _log_api_error("get_case", url, response=e.response, exception=e)
            raise ExternalServiceError("Case store", str(e))
        except Exception as e:
            _log_api_error("get_case", url, exception=e)
            raise ExternalServiceError("Case store", str(e))

    async def create(self, data: Dict[str, Any], actor: ActorContext) -> Dict[str, Any]:
        """
        Persist a new case.

        Args:
            data: Case fields; ``status`` and ``missing_fields`` decide draft state
            actor: Lawyer creating the case

        Returns:
            Dict with id, case_number, case_name, status, is_draft and missing_fields
        """
        case_number = data.get("case_number") or generate_case_number()
        missing_fields = data.get("missing_fields") or []
        status = data.get("status") or (CaseStatus.DRAFT.value if missing_fields else CaseStatus.ACTIVE.value)

        request_data = {
            key: value for key, value in data.items()
            if value not in (None, []) and key != "missing_fields"
        }
        request_data.update({
            "case_name": data.get("case_name") or "Untitled Case",
            "case_number": case_number,
            "status": status,
            "created_by": actor.name,
            "hearing_count": 0,
            "client_welcome_sent": False
        })
        if isinstance(request_data.get("documents_needed"), list):
            request_data["documents_needed"] = ", ".join(request_data["documents_needed"])

        url = self._cases_url()
        try:
            response = await http_client_service.client.post(
                url,
                json=request_data,
                headers=http_client_service.get_auth_headers()
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            _log_api_error("create_case", url, request_data=request_data, response=e.response, exception=e)
            raise ExternalServiceError("Case store", str(e))
        except Exception as e:
            _log_api_error("create_case", url, request_data=request_data, exception=e)
            raise ExternalServiceError("Case store", str(e))

        case_id = result["id"]
        is_draft = status == CaseStatus.DRAFT.value

        await self.append_history_note(case_id, f"Case created by {actor.name}", actor)
        if is_draft and missing_fields:
            await self.append_history_note(case_id, f"⚠️ Missing information: {', '.join(missing_fields)}", actor)

        logger.info(f"✅ Created case {case_number} ({status}) with id {case_id}")
        return {
            "id": case_id,
            "case_number": result.get("case_number") or case_number,
            "case_name": request_data["case_name"],
            "status": status,
            "is_draft": is_draft,
            "missing_fields": missing_fields
        }

    async def update(self, case_id: str, patch: Dict[str, Any], actor: ActorContext) -> Dict[str, Any]:
        """Apply a sparse patch to a case"""
        request_data = dict(patch)
        if isinstance(request_data.get("documents_needed"), list):
            request_data["documents_needed"] = ", ".join(request_data["documents_needed"])
        request_data["last_updated"] = datetime.now().isoformat()
        request_data["updated_by"] = actor.name

        url = self._cases_url(case_id)
        try:
            response = await http_client_service.client.patch(
                url,
                json=request_data,
                headers=http_client_service.get_auth_headers()
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            _log_api_error("update_case", url, request_data=request_data, response=e.response, exception=e)
            raise ExternalServiceError("Case store", str(e))
        except Exception as e:
            _log_api_error("update_case", url, request_data=request_data, exception=e)
            raise ExternalServiceError("Case store", str(e))

        logger.info(f"✅ Updated case {case_id}: {', '.join(patch.keys())}")
        return {"id": case_id, **patch}

    async def close(self, case_id: str, actor: ActorContext) -> None:
        """Mark a case Closed and note it in the history"""
        await self.update(case_id, {"status": CaseStatus.CLOSED.value}, actor)
        await self.append_history_note(case_id, "✅ Case closed/finalized", actor)

    async def add_hearing(self, case_id: str, hearing: HearingRecord, actor: ActorContext) -> Dict[str, Any]:
        """
        Record a hearing and bump the case's hearing count.

        Returns:
            Dict with hearing_id, hearing_number, date and outcome
        """
        current = await self.get_by_id(case_id)
        hearing_number = current.hearing_count + 1

        request_data = hearing.model_dump()
        request_data["hearing_number"] = hearing_number
        request_data["documents"] = ", ".join(hearing.documents)

        url = self._cases_url(case_id, "hearings")
        try:
            response = await http_client_service.client.post(
                url,
                json=request_data,
                headers=http_client_service.get_auth_headers()
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            _log_api_error("add_hearing", url, request_data=request_data, response=e.response, exception=e)
            raise ExternalServiceError("Case store", f"Failed to add hearing: {e}")
        except Exception as e:
            _log_api_error("add_hearing", url, request_data=request_data, exception=e)
            raise ExternalServiceError("Case store", f"Failed to add hearing: {e}")

        patch = {
            "hearing_count": hearing_number,
            "latest_outcome": hearing.outcome or f"Hearing {hearing_number} completed"
        }
        if hearing.next_hearing_date:
            patch["next_hearing"] = hearing.next_hearing_date
        await self.update(case_id, patch, actor)
        await self.append_history_note(case_id, f"📋 Hearing {hearing_number}: {hearing.outcome or 'Completed'}", actor)

        logger.info(f"📋 Added hearing #{hearing_number} to case {case_id}")
        return {
            "hearing_id": result.get("id"),
            "hearing_number": hearing_number,
            "date": hearing.date,
            "outcome": hearing.outcome
        }

    async def append_history_note(self, case_id: str, text: str, actor: ActorContext) -> None:
        """Append a note to the case history. Failures are logged, not raised."""
        url = self._cases_url(case_id, "notes")
        request_data = {
            "text": text,
            "author": actor.name,
            "timestamp": datetime.now().isoformat()
        }
        try:
            response = await http_client_service.client.post(
                url,
                json=request_data,
                headers=http_client_service.get_auth_headers()
            )
            response.raise_for_status()
            logger.info(f"📝 History note added to case {case_id}: {text[:50]}")
        except httpx.HTTPStatusError as e:
            _log_api_error("append_history_note", url, request_data=request_data, response=e.response, exception=e)
        except Exception as e:
            _log_api_error("append_history_note", url, request_data=request_data, exception=e)
