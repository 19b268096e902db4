"""
Duplicate detection for new case creation.
"""

import logging
from typing import Optional

from ..models import CaseRecord
from ..utils.errors import CaseAlreadyExistsError
from ..utils.similarity import similarity

logger = logging.getLogger(__name__)

UNKNOWN_CASE_PREFIX = "Unknown Case"
DUPLICATE_SIMILARITY = 0.85


class DuplicateDetector:
    """Check whether a proposed new case collides with an existing one."""

    def __init__(self, store):
        self.store = store

    @staticmethod
    def search_key(case_name: Optional[str], client_name: Optional[str]) -> Optional[str]:
        """Client name, else the first two words of the case name longer than two characters"""
        if client_name:
            return client_name
        if case_name:
            words = [word for word in case_name.split() if len(word) > 2]
            return " ".join(words[:2])
        return None

    async def check_duplicate(self, case_name: Optional[str] = None, client_name: Optional[str] = None) -> Optional[CaseRecord]:
        """
        Find an existing case the proposed one would duplicate.

        Search failures are logged and treated as no duplicate so that
        creation is never blocked by the check itself.

        Returns:
            The first existing case that qualifies, or None
        """
        if not case_name and not client_name:
            return None

        key = self.search_key(case_name, client_name)
        if not key or len(key) < 3:
            return None

        try:
            results = await self.store.search(key)
        except Exception as e:
            logger.warning(f"⚠️ Duplicate check failed, proceeding with creation: {str(e)}")
            return None

        new_client = (client_name or "").lower().strip()
        new_case = (case_name or "").lower().strip()

        for existing in results:
            existing_client = (existing.client_name or "").lower().strip()
            existing_case = (existing.case_name or "").lower().strip()

            if existing_case.startswith(UNKNOWN_CASE_PREFIX.lower()):
                continue

            if new_client and existing_client == new_client:
                logger.info(f"⚠️ Duplicate detected - same client '{client_name}' as '{existing.case_name}'")
                return existing

            if new_client and new_client in existing_case:
                logger.info(f"⚠️ Duplicate detected - client '{client_name}' in case name '{existing.case_name}'")
                return existing

            if new_case and existing_case == new_case:
                logger.info(f"⚠️ Duplicate detected - same case name '{existing.case_name}'")
                return existing

            if new_case and similarity(existing_case, new_case) >= DUPLICATE_SIMILARITY:
                logger.info(f"⚠️ Duplicate detected - '{case_name}' is very similar to '{existing.case_name}'")
                return existing

        return None

    async def ensure_no_duplicate(self, case_name: Optional[str] = None, client_name: Optional[str] = None) -> None:
        """
        Raises:
            CaseAlreadyExistsError: If the proposed case duplicates an existing one
        """
        existing = await self.check_duplicate(case_name, client_name)
        if existing:
            raise CaseAlreadyExistsError(existing.model_dump())
