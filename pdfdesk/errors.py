"""
Exceptions raised by account flows and document operations.

Every :class:`PdfDeskError` carries the HTTP status the web layer answers
with and a message that is safe to show to the user.
"""


class PdfDeskError(Exception):
    """Base exception for all user-facing failures."""

    status_code = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "Something went wrong."


class ValidationError(PdfDeskError):
    """Missing or malformed form input."""

    @property
    def default_message(self) -> str:
        return "Invalid input."


class MissingFields(ValidationError):
    @property
    def default_message(self) -> str:
        return "All fields are required."


class MissingInput(ValidationError):
    @property
    def default_message(self) -> str:
        return "Required input is missing."


class NoFilesProvided(ValidationError):
    @property
    def default_message(self) -> str:
        return "Please upload at least one file."


class TooManyFiles(ValidationError):
    @property
    def default_message(self) -> str:
        return "Too many files."


class InvalidRangeFormat(ValidationError):
    @property
    def default_message(self) -> str:
        return "Invalid range format."


class DuplicateEmail(ValidationError):
    @property
    def default_message(self) -> str:
        return "Email already registered."


class InvalidCredentials(ValidationError):
    """Raised alike for an unknown email and for a wrong password."""

    @property
    def default_message(self) -> str:
        return "Invalid credentials."


class InvalidDocumentInput(PdfDeskError):
    """Uploaded bytes do not parse as the expected format."""

    @property
    def default_message(self) -> str:
        return "The uploaded file could not be read."


class InvalidPdfInput(InvalidDocumentInput):
    @property
    def default_message(self) -> str:
        return "Invalid PDF file."


class ConversionFailed(PdfDeskError):
    """An external converter or renderer failed; details stay in the logs."""

    status_code = 500

    @property
    def default_message(self) -> str:
        return "Failed to convert the document."


class AuthenticationRequired(Exception):
    """A protected route was hit without a valid session."""

    def __init__(self, login_url: str = "/login") -> None:
        super().__init__("Authentication required")
        self.login_url = login_url
