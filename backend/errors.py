"""
Error types raised by the MCQ pipeline.

Each carries the HTTP status the API answers with; main.py turns them into
``{"error": message}`` bodies.
"""


class MCQGenError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(MCQGenError):
    """Missing or malformed environment configuration. Fatal at startup."""


class ValidationError(MCQGenError):
    """Missing, non-PDF or oversized upload."""

    status_code = 400


class ExtractionError(MCQGenError):
    """The PDF could not be read or contained no text."""


class CompletionError(MCQGenError):
    """Failure talking to the completion API or reading its answer."""

    prefix = "Failed to generate MCQs: "

    def __init__(self, message: str):
        super().__init__(self.prefix + message)


class EmptyResponseError(CompletionError):
    pass


class UnexpectedShapeError(CompletionError):
    pass


class UpstreamProxyError(MCQGenError):
    """Models listing failed upstream; status and body are forwarded as-is."""

    def __init__(self, status_code: int, body):
        super().__init__(f"Upstream responded with status {status_code}")
        self.status_code = status_code
        self.body = body
