from __future__ import annotations

"""
Error taxonomy for the resolution pipeline.

Every failure that reaches a caller is a ResolverError subclass carrying a
`kind` discriminator and, where one exists, the lower-level `cause`.
The outer layers (API / CLI) translate `kind` into a status or exit code;
the pipeline itself never does.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    INVALID_ARGS = "INVALID_ARGS"
    NETWORK_ERROR = "NETWORK_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
    NO_RESULTS = "NO_RESULTS"


_HTTP_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.NO_RESULTS: 404,
    ErrorKind.INVALID_ARGS: 400,
    ErrorKind.NETWORK_ERROR: 503,
    ErrorKind.PARSE_ERROR: 502,
}

_EXIT_CODE: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_ARGS: 2,
    ErrorKind.NO_RESULTS: 3,
    ErrorKind.NETWORK_ERROR: 4,
    ErrorKind.PARSE_ERROR: 5,
}


class ResolverError(Exception):
    kind: ErrorKind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self.kind]

    @property
    def exit_code(self) -> int:
        return _EXIT_CODE[self.kind]

    def details(self) -> Dict[str, Optional[str]]:
        return {
            "type": self.kind.value,
            "message": self.message,
            "cause": str(self.cause) if self.cause is not None else None,
        }

    def __str__(self) -> str:
        if self.cause is not None:
            return f"[{self.kind.value}] {self.message} (cause: {self.cause})"
        return f"[{self.kind.value}] {self.message}"


class InvalidArgsError(ResolverError):
    kind = ErrorKind.INVALID_ARGS


class NetworkError(ResolverError):
    kind = ErrorKind.NETWORK_ERROR


class ParseError(ResolverError):
    kind = ErrorKind.PARSE_ERROR


class NoResultsError(ResolverError):
    kind = ErrorKind.NO_RESULTS

    def __init__(self, query: str) -> None:
        super().__init__(f'No search results for "{query}"')
        self.query = query
