"""
Client email resolution policy.
"""

import logging
from typing import Optional

from ..config import settings
from ..models import ActorContext
from ..utils.helpers import is_real_email, truncate_email

logger = logging.getLogger(__name__)


def resolve_client_email(candidate: Optional[str], actor: ActorContext, context: str = "email") -> Optional[str]:
    """
    Decide which address should receive a client-facing email.

    A real client address is used as-is. A missing or placeholder address
    falls back to the actor's own email, then the configured demo address,
    so notifications still land somewhere a human reads them.

    Args:
        candidate: Client email from the case record or extracted payload
        actor: Lawyer who recorded the voice note
        context: Label for log lines

    Returns:
        Address to send to, or None when nothing usable is available
    """
    fallback = actor.email or settings.DEMO_USER_EMAIL

    if not candidate:
        if fallback:
            logger.info(f"📧 [{context}] No client email - using fallback {truncate_email(fallback)}")
        return fallback or None

    if is_real_email(candidate):
        return candidate

    if fallback:
        logger.info(f"📧 [{context}] Placeholder email {truncate_email(candidate)} - using fallback {truncate_email(fallback)}")
        return fallback

    logger.warning(f"⚠️ [{context}] Placeholder email {truncate_email(candidate)} and no fallback available")
    return None
