import logging
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, Protocol

from config import MAX_IMAGE_BYTES
from errors import (
    AskFailed,
    EmptyQuestion,
    FileTooLarge,
    ImageReadFailed,
    QAClientError,
    UnsupportedImageType,
)
from image_utils import file_size, guess_mime_type, is_image_type, read_as_data_url
from models import DownloadedAnswer, ImageAttachment, Notification, Outcome, SubmissionState

logger = logging.getLogger(__name__)

Notifier = Callable[[Notification], None]


class AnswerService(Protocol):
    def ask(self, question: str, image_data: Optional[str] = None) -> str: ...


def _log_notification(notification: Notification) -> None:
    logger.info("[Notify] %s: %s", notification.title, notification.description)


def _resolved(outcome: Outcome) -> "Future[Outcome]":
    fut: Future = Future()
    fut.set_result(outcome)
    return fut


class SubmissionController:
    """State machine behind the question page.

    All state lives in one ``SubmissionState`` and is only changed by the
    operations below. Image decoding and the answer request run on
    ``executor``; their results are applied only while the generation they
    captured is still current, so a result that arrives after a newer ask,
    a new attachment or a clear is dropped instead of overwriting state.
    """

    def __init__(
        self,
        service: AnswerService,
        notifier: Notifier | None = None,
        executor: Executor | None = None,
        max_image_bytes: int = MAX_IMAGE_BYTES,
    ):
        self.service = service
        self.notifier = notifier or _log_notification
        self.executor = executor or ThreadPoolExecutor(max_workers=2, thread_name_prefix="qa")
        self.max_image_bytes = max_image_bytes

        self._state = SubmissionState()
        self._lock = threading.RLock()
        self._ask_generation = 0
        self._image_generation = 0
        self._clear_epoch = 0
        # bumped whenever the picker must forget its current selection
        self.picker_nonce = 0

    # ─── State access ────────────────────────────────────

    @property
    def state(self) -> SubmissionState:
        with self._lock:
            return self._state.model_copy(deep=True)

    @property
    def loading(self) -> bool:
        with self._lock:
            return self._state.loading

    def set_question(self, text: str) -> None:
        with self._lock:
            self._state.question = text

    def _emit(self, notification: Notification) -> Notification:
        try:
            self.notifier(notification)
        except Exception:
            logger.exception("[Notify] notifier failed for %r", notification.title)
        return notification

    def _fail(self, error: QAClientError) -> Outcome:
        return Outcome(error=error, notification=self._emit(Notification.from_error(error)))

    # ─── Image attachment ────────────────────────────────

    def attach_image(self, file: Any) -> "Future[Outcome]":
        """Validate ``file`` and decode it into the attachment in the background."""
        size = file_size(file)
        if size > self.max_image_bytes:
            logger.warning("[Image] rejected %s: %d bytes > %d", file.name, size, self.max_image_bytes)
            return _resolved(self._fail(FileTooLarge(size, self.max_image_bytes)))

        mime_type = guess_mime_type(file)
        if not is_image_type(mime_type):
            logger.warning("[Image] rejected %s: type %s", file.name, mime_type)
            return _resolved(self._fail(UnsupportedImageType(mime_type)))

        with self._lock:
            self._image_generation += 1
            generation = self._image_generation
        file_name = file.name
        logger.info("[Image] decoding %s (%d bytes)", file_name, size)
        try:
            return self.executor.submit(self._decode_image, file, file_name, generation)
        except RuntimeError as e:
            # executor already shut down; the decode never started
            logger.error("[Image] could not dispatch decode of %s: %s", file_name, e)
            return _resolved(self._fail(ImageReadFailed()))

    def _decode_image(self, file: Any, file_name: str, generation: int) -> Outcome:
        try:
            data_uri = read_as_data_url(file)
        except Exception:
            logger.exception("[Image] could not read %s", file_name)
            data_uri = None
        with self._lock:
            if generation != self._image_generation:
                logger.info("[Image] discarded stale decode of %s", file_name)
                return Outcome(stale=True)
            if data_uri is None:
                return self._fail(ImageReadFailed())
            attachment = ImageAttachment(data_uri=data_uri, file_name=file_name)
            self._state.attachment = attachment
        logger.info("[Image] attached %s", file_name)
        return Outcome(value=attachment)

    def remove_image(self) -> None:
        with self._lock:
            self._state.attachment = None
            self._image_generation += 1
            self.picker_nonce += 1

    # ─── Ask ─────────────────────────────────────────────

    def ask_question(self) -> "Future[Outcome]":
        with self._lock:
            question = self._state.question
            empty = not question.strip()
            if not empty:
                self._ask_generation += 1
                generation = (self._ask_generation, self._clear_epoch)
                self._state.loading = True
                self._state.answer = ""
                image_data = self._state.attachment.data_uri if self._state.attachment else None

        if empty:
            logger.info("[Ask] empty question, nothing sent")
            return _resolved(self._fail(EmptyQuestion()))

        logger.info("[Ask] dispatching question: '%s...'", question[:50])
        try:
            return self.executor.submit(self._run_ask, question, image_data, generation)
        except RuntimeError as e:
            # executor already shut down; the request never started
            logger.error("[Ask] could not dispatch: %s", e)
            return _resolved(self._finish_ask(generation, error=AskFailed()))

    def _run_ask(self, question: str, image_data: str | None, generation: tuple[int, int]) -> Outcome:
        start = time.time()
        answer = None
        error = None
        try:
            answer = self.service.ask(question, image_data)
            if not isinstance(answer, str):
                raise AskFailed()
        except QAClientError as e:
            error = e if isinstance(e, AskFailed) else AskFailed(e.message)
        except Exception as e:
            logger.exception("[Ask] unexpected failure")
            error = AskFailed(str(e) or None)
        finally:
            logger.info("[Ask] request finished in %.2f seconds", time.time() - start)
        return self._finish_ask(generation, answer=answer, error=error)

    def _finish_ask(self, generation: tuple[int, int], answer: str | None = None,
                    error: AskFailed | None = None) -> Outcome:
        ask_generation, epoch = generation
        with self._lock:
            current = ask_generation == self._ask_generation
            if current:
                self._state.loading = False
            if not current or epoch != self._clear_epoch:
                logger.info("[Ask] discarded stale result of request #%d", ask_generation)
                return Outcome(stale=True)
            if error is None:
                self._state.answer = answer

        if error is not None:
            logger.error("[Ask] failed: %s", error.message)
            return self._fail(error)
        return Outcome(
            value=answer,
            notification=self._emit(Notification(
                title="Answer received!",
                description="Your question has been answered.",
                variant="success",
            )),
        )

    # ─── Download & clear ────────────────────────────────

    def prepare_download(self) -> DownloadedAnswer:
        """Current question and answer as the plain-text export, without side effects."""
        with self._lock:
            content = f"Question: {self._state.question}\n\nAnswer:\n{self._state.answer}"
        return DownloadedAnswer(content=content)

    def download_answer(self) -> Outcome:
        download = self.prepare_download()
        logger.info("[Download] prepared %s (%d bytes)", download.file_name, len(download.data))
        return Outcome(
            value=download,
            notification=self._emit(Notification(
                title="Downloaded!", description="Answer saved as text file.",
            )),
        )

    def clear_all(self) -> Outcome:
        with self._lock:
            self._state.answer = ""
            self._state.question = ""
            self._clear_epoch += 1
            self.remove_image()
        logger.info("[Clear] question, answer and image cleared")
        return Outcome(notification=self._emit(Notification(
            title="Cleared!", description="Question and answer have been cleared.",
        )))

    def shutdown(self) -> None:
        self.executor.shutdown(wait=False)
