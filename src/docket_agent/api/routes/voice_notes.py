"""
Voice note processing API routes.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException

from ...core import WorkflowOrchestrator
from ...models import VoiceNoteRequest, WorkflowResult
from ..dependencies import get_case_store, get_extractor, get_notifier, get_scheduler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/process", response_model=WorkflowResult)
async def process_voice_note(
    request: VoiceNoteRequest,
    store=Depends(get_case_store),
    scheduler=Depends(get_scheduler),
    notifier=Depends(get_notifier),
    extractor=Depends(get_extractor)
):
    """Run the case workflow over a transcribed voice note"""
    transcription = request.get_transcription()
    if not transcription:
        raise HTTPException(
            status_code=400,
            detail="No transcription provided. Send the text as 'transcription', 'text' or 'message'."
        )

    logger.info(f"🗣️ Voice note received from {request.actor.id} ({len(transcription)} chars)")
    orchestrator = WorkflowOrchestrator(request.actor, store, scheduler, notifier, extractor)
    return await orchestrator.process_voice_note(transcription)
