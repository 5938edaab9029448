from typing import Optional

class DiagnosticError(Exception):
    """Base error carrying the HTTP status and the message shown to callers"""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None,
                 hint: Optional[str] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.hint = hint
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.hint:
            body["hint"] = self.hint
        return body

class InvalidRequestError(DiagnosticError):
    status_code = 400
    default_message = "Invalid request"

class MethodNotAllowedError(DiagnosticError):
    status_code = 405
    default_message = "Method Not Allowed"

class ConfigurationError(DiagnosticError):
    """Assistant credential is missing"""
    status_code = 503
    default_message = "Assistant is not configured"

class UpstreamError(DiagnosticError):
    """Generative AI provider failed"""
    status_code = 500

class UpstreamAuthError(UpstreamError):
    """Provider rejected the credential"""
    status_code = 403
    default_message = "The AI provider rejected the API key"

class UpstreamTimeoutError(UpstreamError):
    status_code = 504
    default_message = "The assistant took too long to respond"
