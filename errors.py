GENERIC_ASK_ERROR = "Failed to process your question. Please try again."


class QAClientError(Exception):
    """Base class for every failure the submission controller reports."""

    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FileTooLarge(QAClientError):
    title = "File too large"

    def __init__(self, size: int, limit: int):
        limit_mb = limit // (1024 * 1024)
        super().__init__(f"Please select an image smaller than {limit_mb}MB.")
        self.size = size
        self.limit = limit


class UnsupportedImageType(QAClientError):
    title = "Unsupported file"

    def __init__(self, mime_type: str):
        super().__init__(f"Please select an image file (got {mime_type}).")
        self.mime_type = mime_type


class EmptyQuestion(QAClientError):
    title = "Please enter a question"

    def __init__(self):
        super().__init__("Type your question above or upload an image.")


class AskFailed(QAClientError):
    title = "Error"

    def __init__(self, message: str | None = None):
        super().__init__(message or GENERIC_ASK_ERROR)


class ImageReadFailed(QAClientError):
    title = "Could not read image"

    def __init__(self):
        super().__init__("Could not read the selected image.")
