import json
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
import requests

from controller import SubmissionController
from errors import AskFailed
from models import SelectedFile

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 1016


def make_response(status: int, body=None, raw: bytes | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = raw if raw is not None else json.dumps(body).encode()
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeSession:
    """Stands in for ``requests.Session``; records every POST."""

    def __init__(self, response=None, exc: Exception | None = None):
        self.response = response
        self.exc = exc
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc is not None:
            raise self.exc
        return self.response


class FakeAnswerService:
    def __init__(self, answer: str = "Gravity is...", error: Exception | None = None):
        self.answer = answer
        self.error = error
        self.calls = []
        self.gate: threading.Event | None = None

    def ask(self, question, image_data=None):
        self.calls.append((question, image_data))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.answer


class GatedAnswerService:
    """Each call blocks on its own event so tests can resolve requests out of order."""

    def __init__(self):
        self.gates: list[threading.Event] = []
        self.answers: list[str] = []
        self.calls = []
        self.started = threading.Semaphore(0)

    def ask(self, question, image_data=None):
        gate = threading.Event()
        index = len(self.calls)
        self.calls.append((question, image_data))
        self.gates.append(gate)
        self.started.release()
        gate.wait(timeout=5)
        if self.answers[index] is None:
            raise AskFailed("boom")
        return self.answers[index]


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def service():
    return FakeAnswerService()


@pytest.fixture
def controller(service, notifications):
    ctrl = SubmissionController(
        service,
        notifier=notifications.append,
        executor=ThreadPoolExecutor(max_workers=4),
    )
    yield ctrl
    ctrl.executor.shutdown(wait=True)


@pytest.fixture
def small_image():
    return SelectedFile(name="question.png", size=len(PNG_BYTES), type="image/png", data=PNG_BYTES)


@pytest.fixture
def big_image():
    return SelectedFile(name="huge.jpg", size=6 * 1000 * 1000, type="image/jpeg", data=b"")
