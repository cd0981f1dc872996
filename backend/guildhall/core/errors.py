"""Typed errors raised by the store and the entity services.

Each carries the HTTP status and the ``error`` label the API returns for it;
the handlers in ``guildhall.main`` turn them into
``{"error": <label>, "message": <text>}`` responses.
"""


class ChatError(Exception):
    status_code: int = 500
    label: str | bool = True

    def __init__(self, message: str, label: str | bool | None = None) -> None:
        super().__init__(message)
        self.message = message
        if label is not None:
            self.label = label


class BadRequestError(ChatError):
    status_code = 400
    label = "Bad Request"


class AuthenticationError(ChatError):
    status_code = 401
    label = "Unauthorized"


class ForbiddenError(ChatError):
    status_code = 403
    label = "Forbidden"


class NotFoundError(ChatError):
    status_code = 404
    label = "Not Found"


class StoreUnavailableError(ChatError):
    """The backing database could not be reached or rejected the call.

    Never retried; the API answers with the generic 500 body.
    """

    status_code = 500
    label = True
