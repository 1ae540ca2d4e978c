from typing import List, Optional


class QueryValidationError(ValueError):
    """Raised when the incoming search parameters are invalid (HTTP 400)"""


class MissingCredentialsError(Exception):
    """Raised by a provider when its environment credentials are not set"""

    def __init__(self, provider_name: str, missing: List[str]):
        self.provider_name = provider_name
        self.missing = list(missing)
        super().__init__(f"{provider_name} credentials missing ({', '.join(self.missing)})")


class UpstreamError(Exception):
    """
    Raised when an upstream job API answers with a non-2xx status
    or a body that cannot be used.

    Keeps the raw body so callers can decide how much of it to expose.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: str = ""):
        self.status = status
        self.body = body or ""
        super().__init__(message)
