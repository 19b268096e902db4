"""
Per-run audit trail of workflow steps.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..models import OperationLogEntry

logger = logging.getLogger(__name__)


class OperationLog:
    """Append-only list of operations performed during one workflow run."""

    def __init__(self, user: Optional[str] = None):
        self.user = user
        self._entries: List[OperationLogEntry] = []

    def log(self, op_type: str, message: str) -> OperationLogEntry:
        entry = OperationLogEntry(
            timestamp=datetime.now().isoformat(),
            type=op_type,
            message=message,
            user=self.user
        )
        self._entries.append(entry)
        logger.info(f"Orchestrator [{op_type}]: {message}")
        return entry

    @property
    def entries(self) -> List[OperationLogEntry]:
        return list(self._entries)
