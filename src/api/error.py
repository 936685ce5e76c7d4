from typing import Dict, Optional

from fastapi import status

from src.libs.result import Error

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class ClientError(Exception):
    """Caller-side failure; the error code and message are returned as-is"""

    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.headers = headers
        super().__init__(base_error.message)

    def to_body(self) -> dict:
        return {"error": {"code": self.base_error.code, "message": self.base_error.message}}


class ServerError(Exception):
    """Unexpected failure; only the code leaves the process, never the message"""

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)

    def to_body(self) -> dict:
        return {"error": {"code": self.base_error.code, "message": "Internal server error"}}
