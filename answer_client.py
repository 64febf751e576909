import logging
import time

import requests
from pydantic import ValidationError

from config import ANSWER_SERVICE_URL, REQUEST_TIMEOUT
from errors import AskFailed
from models import AskRequest, AskResponse, ErrorResponse

logger = logging.getLogger(__name__)

HTTP_ERROR_FALLBACK = "Failed to get answer"


def _error_message(body) -> str | None:
    """Service-provided ``error`` string, if the body carries one."""
    if not isinstance(body, dict) or "error" not in body:
        return None
    try:
        return ErrorResponse.model_validate(body).error or None
    except ValidationError:
        return None


class AnswerServiceClient:
    """HTTP client for the remote answering service.

    ``ask`` either returns the answer text or raises :class:`AskFailed`;
    every transport and payload problem is normalized to that one error.
    """

    def __init__(
        self,
        url: str = ANSWER_SERVICE_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def ask(self, question: str, image_data: str | None = None) -> str:
        payload = AskRequest(question=question, imageData=image_data)
        logger.info(
            "[AnswerService] POST %s (question: %d chars, image: %s)",
            self.url, len(question), "yes" if image_data else "no",
        )
        start = time.time()

        try:
            resp = self.session.post(
                self.url,
                json=payload.model_dump(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("[AnswerService] request failed: %s", e)
            raise AskFailed() from e

        logger.info(
            "[AnswerService] status %s in %.2f seconds",
            resp.status_code, time.time() - start,
        )

        try:
            body = resp.json()
        except ValueError as e:
            logger.error("[AnswerService] malformed response body: %s", e)
            raise AskFailed() from e

        if not resp.ok:
            raise AskFailed(_error_message(body) or HTTP_ERROR_FALLBACK)

        message = _error_message(body)
        if message:
            raise AskFailed(message)

        try:
            answer = AskResponse.model_validate(body).answer
        except ValidationError as e:
            logger.error("[AnswerService] response without an answer: %s", body)
            raise AskFailed() from e

        logger.info("[AnswerService] answer length: %d characters", len(answer))
        return answer
