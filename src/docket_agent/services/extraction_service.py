"""
Entity extraction service turning voice-note transcripts into structured case payloads.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import HumanMessage, SystemMessage
from openai import AsyncOpenAI
from pydantic import ValidationError

from ..config import settings
from ..models import ActorContext, ActorRole, ExtractedCasePayload, ExtractionResult
from ..utils import load_extraction_prompt, load_system_prompt
from ..utils.errors import AIProcessingError

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK_LENGTH = 200


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence from a model reply"""
    cleaned = text.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def apply_role_constraints(cases: List[Dict[str, Any]], actor: ActorContext) -> List[Dict[str, Any]]:
    """
    Enforce the actor's role on raw extracted cases.

    A JUNIOR can never delegate, so any assignment is cleared. For a
    SENIOR, a junior email in the payload implies the case is being assigned.
    """
    processed = []
    for case in cases:
        case = dict(case)
        if actor.role == ActorRole.JUNIOR:
            case["assign_to_junior"] = False
            case["junior_name"] = None
            case["junior_email"] = None
        elif (case.get("junior_email") or "").strip():
            case["assign_to_junior"] = True
        case["documents_needed"] = case.get("documents_needed") or []
        case["missing_fields"] = case.get("missing_fields") or []
        processed.append(case)
    return processed


def parse_extraction_response(text: str, actor: ActorContext) -> ExtractionResult:
    """
    Parse a model reply into a validated ExtractionResult.

    Raises:
        AIProcessingError: If the reply is not the expected JSON document
    """
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise AIProcessingError(f"Failed to extract case information: invalid JSON ({e})")

    if not isinstance(data, dict):
        raise AIProcessingError("Failed to extract case information: expected a JSON object")

    data["cases"] = apply_role_constraints(data.get("cases") or [], actor)
    try:
        return ExtractionResult.model_validate(data)
    except ValidationError as e:
        raise AIProcessingError(f"Failed to extract case information: {e}")


def _message_text(content: Any) -> str:
    # Anthropic replies may arrive as a list of content blocks
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return content or ""


class ExtractionService:
    """
    Extractor backed by Anthropic, with OpenAI as fallback.

    Providers without an API key are skipped. When a configured provider
    fails the next one is tried; if none succeeds an AIProcessingError is raised.
    """

    def __init__(self):
        self._anthropic_llm: Optional[ChatAnthropic] = None
        self._openai_client: Optional[AsyncOpenAI] = None
        self.summary_prompt = load_system_prompt('case_summary_system_prompt.md')

    def is_available(self) -> bool:
        return bool(settings.ANTHROPIC_API_KEY or settings.OPENAI_API_KEY)

    def _providers(self) -> List[Tuple[str, Callable[[str, str, bool], Awaitable[str]]]]:
        providers = []
        if settings.ANTHROPIC_API_KEY:
            providers.append(("anthropic", self._call_anthropic))
        if settings.OPENAI_API_KEY:
            providers.append(("openai", self._call_openai))
        return providers

    async def _call_anthropic(self, system_prompt: str, user_prompt: str, json_mode: bool) -> str:
        if self._anthropic_llm is None:
            self._anthropic_llm = ChatAnthropic(
                model=settings.ANTHROPIC_MODEL,
                api_key=settings.ANTHROPIC_API_KEY,
                temperature=0,
                max_tokens=4096
            )
        response = await self._anthropic_llm.ainvoke([
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_prompt)
        ])
        return _message_text(response.content)

    async def _call_openai(self, system_prompt: str, user_prompt: str, json_mode: bool) -> str:
        if self._openai_client is None:
            self._openai_client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        request = {
            "model": settings.OPENAI_MODEL,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            "temperature": 0,
            "max_tokens": 4096
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}
        response = await self._openai_client.chat.completions.create(**request)
        return response.choices[0].message.content or ""

    async def _complete(self, system_prompt: str, user_prompt: str, json_mode: bool = False) -> str:
        errors = []
        for name, call in self._providers():
            try:
                logger.info(f"🧠 Calling {name} for extraction")
                text = await call(system_prompt, user_prompt, json_mode)
                logger.info(f"✅ {name} responded ({len(text)} chars)")
                return text
            except Exception as e:
                logger.warning(f"⚠️ {name} failed: {str(e)}")
                errors.append(f"{name}: {str(e)}")

        if not errors:
            raise AIProcessingError("No extraction provider configured. Set ANTHROPIC_API_KEY or OPENAI_API_KEY")
        raise AIProcessingError(f"All extraction providers failed. Errors: {'; '.join(errors)}")

    async def extract(self, transcript: str, actor: ActorContext) -> ExtractionResult:
        """
        Extract case payloads from a voice-note transcript.

        Args:
            transcript: Transcribed voice note
            actor: Lawyer who recorded it; shapes the prompt and role constraints

        Returns:
            ExtractionResult with one payload per case mentioned
        """
        logger.info(f"🧠 Extracting cases for {actor.id} from {len(transcript)} chars of transcript")
        system_prompt = load_extraction_prompt(
            actor.name,
            actor.role.value,
            junior_name=actor.junior_name,
            junior_email=actor.junior_email
        )
        user_prompt = f'Analyze this voice note and extract all case information:\n\n"{transcript}"'

        text = await self._complete(system_prompt, user_prompt, json_mode=True)
        result = parse_extraction_response(text, actor)

        logger.info(f"✅ Extraction complete: {len(result.cases)} case(s), clarification={result.requires_clarification}")
        return result

    async def generate_case_summary(self, payload: ExtractedCasePayload) -> str:
        """Write a short case summary; falls back to the first 200 characters of the notes"""
        user_prompt = (
            "Generate a brief, professional legal case summary (2-3 sentences) for:\n"
            f"Case Name: {payload.case_name}\n"
            f"Client: {payload.client_name}\n"
            f"Details: {payload.raw_notes or 'No additional details'}"
        )
        try:
            summary = await self._complete(self.summary_prompt, user_prompt)
            return summary.strip()
        except AIProcessingError as e:
            logger.error(f"❌ Summary generation failed: {e.message}")
            return (payload.raw_notes or payload.case_summary or "Case summary pending.")[:SUMMARY_FALLBACK_LENGTH]
