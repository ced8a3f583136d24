from typing import Optional


class GradingError(Exception):
    """Base class for failures surfaced to the caller as ``{"error": message}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingFile(GradingError):
    status_code = 400

    def __init__(self, message: str = "No file provided"):
        super().__init__(message)


class MissingFields(GradingError):
    status_code = 400

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class UnsupportedFileType(GradingError):
    status_code = 400

    def __init__(self, file_type: str):
        self.file_type = file_type
        super().__init__(
            f"Unsupported file type: '{file_type or 'unknown'}'. Supported types: PDF, DOCX"
        )


class EmptyOrUnreadableDocument(GradingError):
    pass


class MissingCredential(GradingError):
    def __init__(self, message: str = "API key is not configured for the model client"):
        super().__init__(message)


class UpstreamError(GradingError):
    def __init__(self, status: Optional[int], body: str):
        self.status = status
        self.body = body
        if status is None:
            message = f"Model endpoint unreachable: {body}"
        else:
            message = f"Model endpoint error ({status}): {body}"
        super().__init__(message)


class NoContent(GradingError):
    def __init__(self, message: str = "No response content from the model"):
        super().__init__(message)


class InvalidModelResponse(GradingError):
    pass
