from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from config import DOWNLOAD_FILE_NAME, DOWNLOAD_MIME_TYPE
from errors import QAClientError

# ─── Wire bodies ─────────────────────────────────────────

class AskRequest(BaseModel):
    question: str
    imageData: Optional[str] = None

class AskResponse(BaseModel):
    answer: str

class ErrorResponse(BaseModel):
    error: str

# ─── Files & attachments ─────────────────────────────────

class SelectedFile(BaseModel):
    """A picked file: same shape as Streamlit's UploadedFile."""

    name: str
    size: int
    type: str = ""
    data: bytes = b""

    def getvalue(self) -> bytes:
        return self.data

class ImageAttachment(BaseModel):
    data_uri: str
    file_name: str

    @property
    def mime_type(self) -> str:
        header = self.data_uri.split(",", 1)[0]
        return header.removeprefix("data:").split(";", 1)[0]

# ─── Controller state ────────────────────────────────────

Phase = Literal["idle", "image_attached", "loading", "answered"]

class SubmissionState(BaseModel):
    question: str = ""
    answer: str = ""
    attachment: Optional[ImageAttachment] = None
    loading: bool = False

    @property
    def phase(self) -> Phase:
        if self.loading:
            return "loading"
        if self.answer:
            return "answered"
        if self.attachment is not None:
            return "image_attached"
        return "idle"

    @property
    def image_file_name(self) -> str:
        return self.attachment.file_name if self.attachment else ""

# ─── Results ─────────────────────────────────────────────

class Notification(BaseModel):
    title: str
    description: str = ""
    variant: Literal["success", "info", "destructive"] = "info"

    @classmethod
    def from_error(cls, error: QAClientError) -> "Notification":
        return cls(title=error.title, description=error.message, variant="destructive")

class DownloadedAnswer(BaseModel):
    file_name: str = DOWNLOAD_FILE_NAME
    mime_type: str = DOWNLOAD_MIME_TYPE
    content: str

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")

class Outcome(BaseModel):
    """Result of one controller operation, handed back instead of a toast call."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    notification: Optional[Notification] = None
    error: Optional[QAClientError] = None
    value: Any = None
    stale: bool = Field(default=False, description="result arrived after being superseded")

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale

    def raise_for_error(self) -> "Outcome":
        if self.error is not None:
            raise self.error
        return self
