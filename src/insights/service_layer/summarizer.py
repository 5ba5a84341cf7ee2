import json
import logging
import threading
from typing import Sequence

from insights.adapters.text_generation_client import (
    AbstractTextGenerationClient,
    TextGenerationError,
)
from insights.domain.model import (
    CONTENT_PREFIX,
    GENERIC_FAILURE_MESSAGE,
    INSTRUCTIONS,
    InsightBoard,
    project_records,
)

logger = logging.getLogger(__name__)


def build_content(records: Sequence) -> str:
    projection = project_records(records)
    return CONTENT_PREFIX + json.dumps(projection, ensure_ascii=False)


def summarize(records: Sequence, client: AbstractTextGenerationClient) -> str:
    """
    Send the privacy-reduced projection of ``records`` for analysis.

    No retry and no partial result: any failure becomes a ServiceFailure
    carrying the generic operator message.
    """
    logger.info(f"Generating insight for {len(records)} records")
    content = build_content(records)

    try:
        return client.generate(INSTRUCTIONS, content)
    except TextGenerationError as e:
        logger.error(f"Insight generation failed: {e}")
        raise ServiceFailure(GENERIC_FAILURE_MESSAGE) from e


class InsightPanel:
    """
    Shared analysis panel for the insight endpoints.

    Each request takes a token from begin(). A response whose token went stale
    (the operator left, or a newer request started) is dropped by resolve().
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.board = InsightBoard()

    def begin(self) -> int:
        with self._lock:
            self.board, token = self.board.begin()
            return token

    def leave(self):
        with self._lock:
            self.board = self.board.leave()

    def resolve(self, token: int, text: str) -> bool:
        """Apply a response; False when it arrived for a stale request."""
        with self._lock:
            before = self.board
            self.board = before.resolve(token, text)
            if self.board is before:
                logger.info(f"Discarding stale insight response (request {token})")
                return False
            return True

    def fail(self, token: int):
        with self._lock:
            self.board = self.board.fail(token)


class ServiceFailure(Exception):
    """Recoverable failure of the summarizer call."""
    kind = "ServiceFailure"
