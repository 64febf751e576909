import base64
import io

import pytest
from pydantic import ValidationError

from image_utils import (
    file_size,
    guess_mime_type,
    is_image_type,
    read_as_data_url,
    split_data_url,
)
from models import ImageAttachment, Notification, SelectedFile
from tests.conftest import PNG_BYTES


class NamedBytesIO(io.BytesIO):
    def __init__(self, data: bytes, name: str):
        super().__init__(data)
        self.name = name


def test_data_url_uses_declared_type(small_image):
    url = read_as_data_url(small_image)

    assert url == "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()


def test_mime_type_guessed_from_name_when_missing():
    f = SelectedFile(name="scan.jpeg", size=3, data=b"abc")

    assert guess_mime_type(f) == "image/jpeg"
    assert read_as_data_url(f).startswith("data:image/jpeg;base64,")


def test_unknown_type_falls_back_to_octet_stream():
    f = SelectedFile(name="blob", size=1, data=b"x")

    assert guess_mime_type(f) == "application/octet-stream"
    assert not is_image_type(guess_mime_type(f))


def test_plain_file_objects_are_read_and_rewound():
    f = NamedBytesIO(b"hello", "hello.gif")

    assert file_size(f) == 5
    assert read_as_data_url(f) == "data:image/gif;base64,aGVsbG8="
    assert f.read() == b"hello"


def test_split_data_url_round_trips(small_image):
    mime, raw = split_data_url(read_as_data_url(small_image))

    assert mime == "image/png"
    assert raw == PNG_BYTES


def test_split_rejects_non_data_uri():
    with pytest.raises(ValueError):
        split_data_url("https://example.com/a.png")


def test_attachment_mime_type():
    att = ImageAttachment(data_uri="data:image/webp;base64,AAAA", file_name="a.webp")

    assert att.mime_type == "image/webp"



def test_notification_variants():
    assert Notification(title="Cleared!").variant == "info"
    for variant in ("success", "info", "destructive"):
        assert Notification(title="t", variant=variant).variant == variant
    with pytest.raises(ValidationError):
        Notification(title="t", variant="default")
