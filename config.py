import logging
import os

from dotenv import load_dotenv

load_dotenv()

# ─── Answer service ──────────────────────────────────────
SUPABASE_URL = os.getenv("SUPABASE_URL", "http://localhost:54321")
ANSWER_SERVICE_URL = os.getenv(
    "ANSWER_SERVICE_URL",
    f"{SUPABASE_URL.rstrip('/')}/functions/v1/ask-english-question",
)
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))

# ─── Attachments & downloads ─────────────────────────────
MAX_IMAGE_BYTES = 5 * 1024 * 1024
DOWNLOAD_FILE_NAME = "kk-sir-answer.txt"
DOWNLOAD_MIME_TYPE = "text/plain"

# ─── Logging ─────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once for the UI process."""
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
