import base64
import mimetypes
from typing import Any

DEFAULT_MIME_TYPE = "application/octet-stream"


def _payload(file: Any) -> bytes:
    if hasattr(file, "getvalue"):
        return file.getvalue()
    data = file.read()
    # Reset file pointer (in case caller wants to re-use it later)
    if hasattr(file, "seek"):
        file.seek(0)
    return data


def file_size(file: Any) -> int:
    """Byte size as reported by the picker, falling back to the payload length."""
    size = getattr(file, "size", None)
    if size is None:
        size = len(_payload(file))
    return int(size)


def guess_mime_type(file: Any) -> str:
    mime = getattr(file, "type", None)
    if mime:
        return mime
    guessed, _ = mimetypes.guess_type(getattr(file, "name", "") or "")
    return guessed or DEFAULT_MIME_TYPE


def is_image_type(mime_type: str) -> bool:
    return mime_type.startswith("image/")


def read_as_data_url(file: Any) -> str:
    """Read the whole file and return it as a base64 ``data:`` URI."""
    b64 = base64.b64encode(_payload(file)).decode()
    return f"data:{guess_mime_type(file)};base64,{b64}"


def split_data_url(data_uri: str) -> tuple[str, bytes]:
    """Inverse of :func:`read_as_data_url`; returns ``(mime_type, raw_bytes)``."""
    if not data_uri.startswith("data:") or "," not in data_uri:
        raise ValueError("Not a data URI")
    header, b64_data = data_uri.split(",", 1)
    mime_type = header.removeprefix("data:").split(";", 1)[0] or DEFAULT_MIME_TYPE
    return mime_type, base64.b64decode(b64_data)

