"""Error taxonomy shared by the conversation core and the HTTP layer.

Every failure that reaches a client is rendered as
``{"success": false, "error": ..., "isFormError": ...}`` by the handlers
registered in ``hearu.main``.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None, *, is_form_error: bool = False):
        self.message = message or self.default_message
        self.is_form_error = is_form_error
        super().__init__(self.message)


class InvalidInput(AppError):
    status_code = 422
    default_message = "Invalid input"

    def __init__(self, message: str | None = None, *, is_form_error: bool = True):
        super().__init__(message, is_form_error=is_form_error)


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Already exists"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Not authenticated"


class GenerationUnavailable(AppError):
    status_code = 502
    default_message = "Conversation model unavailable"


class AssessmentMalformed(AppError):
    status_code = 502
    default_message = "Invalid response format from AI"


class Internal(AppError):
    status_code = 500
