"""
Exceptions raised by the CAS extraction pipeline.

Every fatal outcome of a parse maps to exactly one of these classes. Callers
treat any of them as "no data extracted" and can show ``user_message`` to
the person who uploaded the file.
"""


class CASParseError(Exception):
    """Base exception for all fatal CAS parsing errors."""

    user_message = "The statement could not be processed"

    def __init__(self, message: str, error_code: str):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class WrongPasswordError(CASParseError):
    """The PDF is encrypted and the supplied password was rejected."""

    user_message = "Incorrect PDF password. Please re-enter the password and try again."

    def __init__(self, message: str = "Incorrect password for encrypted PDF"):
        super().__init__(message, error_code="WRONG_PASSWORD")


class UnreadableDocumentError(CASParseError):
    """The bytes could not be decoded as a PDF."""

    user_message = "The file is corrupted or is not a valid PDF."

    def __init__(self, message: str = "PDF file is corrupted or unreadable"):
        super().__init__(message, error_code="UNREADABLE_DOCUMENT")


class InsufficientTextError(CASParseError):
    """Too little text came out of the PDF, usually a scanned image."""

    user_message = (
        "No readable text was found. Scanned statements are not supported; "
        "please download the original statement from the depository."
    )

    def __init__(self, message: str = "Extracted text is too short", text_length: int = 0):
        super().__init__(message, error_code="INSUFFICIENT_TEXT")
        self.text_length = text_length


class UnrecognizedFormatError(CASParseError):
    """No format signature matched the document text."""

    user_message = "Unknown CAS format. Currently supported: CDSL."

    def __init__(self, message: str = "Unknown CAS format"):
        super().__init__(message, error_code="UNRECOGNIZED_FORMAT")


class FormatParseFailureError(CASParseError):
    """The format was detected but no accounts or funds could be extracted."""

    user_message = "The statement was recognised but no holdings could be extracted."

    def __init__(
        self,
        message: str = "No demat accounts or mutual funds found",
        cas_type: str = "",
    ):
        super().__init__(message, error_code="FORMAT_PARSE_FAILURE")
        self.cas_type = cas_type


class FileTooLargeError(CASParseError):
    """The input exceeds the size accepted by the caller."""

    user_message = "The file is too large. Maximum size is 10 MB."

    def __init__(self, message: str = "PDF file is too large", size: int = 0):
        super().__init__(message, error_code="FILE_TOO_LARGE")
        self.size = size
