import os
from pathlib import Path


BASE_DIR = Path(__file__).resolve().parent  # .../pdfdesk
TEMPLATES_DIR = BASE_DIR / "templates"

INSECURE_SECRET = "dev-secret-change-me"


def load_secret_key() -> str:
    """Read the token signing secret from the environment.

    There is no fallback: a missing secret, or the old placeholder value,
    stops the service from starting.
    """
    secret = (os.environ.get("PDFDESK_SECRET_KEY") or "").strip()
    if not secret:
        raise RuntimeError("PDFDESK_SECRET_KEY must be set to a non-empty value before starting the service.")
    if secret == INSECURE_SECRET:
        raise RuntimeError("PDFDESK_SECRET_KEY is using an insecure default value; please provide a unique secret.")
    return secret


# ----------------------------
# Session
# ----------------------------
SECRET_KEY = load_secret_key()
COOKIE_NAME = "token"
SESSION_MAX_AGE_SECONDS = 2 * 60 * 60  # 2 hours
COOKIE_SECURE = os.environ.get("PDFDESK_COOKIE_SECURE", "false").lower() in ("1", "true", "yes")


# ----------------------------
# Uploads
# ----------------------------
MAX_UPLOAD_MB = int(os.environ.get("PDFDESK_MAX_UPLOAD_MB", "20"))
MAX_UPLOAD_BYTES = MAX_UPLOAD_MB * 1024 * 1024

MAX_MERGE_FILES = 20
MAX_IMAGE_FILES = 50


# ----------------------------
# Rendering
# ----------------------------
# Letter page in points; images are fitted inside IMAGE_FIT_BOX on it.
IMAGE_PAGE_SIZE = (612, 792)
IMAGE_FIT_BOX = (500, 700)

RENDER_TIMEOUT_SECONDS = float(os.environ.get("PDFDESK_RENDER_TIMEOUT_SECONDS", "60"))

LOG_LEVEL = os.environ.get("PDFDESK_LOG_LEVEL", "INFO").upper()
