class NotFoundError(LookupError):
    """Requested row is absent or not owned by the caller."""


class GatewayError(RuntimeError):
    """The payment gateway rejected or failed a request."""

    def __init__(self, message: str, *, status_code=None, payload=None):
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload or {}
