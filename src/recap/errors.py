"""Error taxonomy for the recap pipeline and its client.

Server-side errors carry the HTTP status they map to; the app's exception
handler renders them as ``{"error": message}`` (plus ``raw`` for malformed
assistant output). Client-side errors never cross the wire.
"""

from __future__ import annotations

from typing import Any


class RecapError(Exception):
    """Base class for every failure the recap pipeline surfaces to a caller."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


# -- Server-side --------------------------------------------------------------


class ConfigurationError(RecapError):
    """A required credential or template identifier is missing."""


class ValidationError(RecapError):
    """The request was rejected before any remote call."""

    status_code = 400


class UpstreamError(RecapError):
    """The remote run ended in a terminal state other than ``completed``.

    Also raised when the remote service cannot be reached or answers with an
    HTTP error while the session is being created, submitted or read.

    Attributes:
        status: Terminal run status, or None for transport failures.
    """

    def __init__(self, message: str, status: str | None = None) -> None:
        self.status = status
        super().__init__(message)


class UpstreamTimeoutError(UpstreamError):
    """The run was still non-terminal when the polling bound elapsed.

    The remote run is only cancelled on a best-effort basis.

    Attributes:
        status: Last observed (non-terminal) status.
        timeout: The polling bound in seconds.
    """

    def __init__(self, status: str | None, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            f"Run did not finish within {timeout:g}s (last status: {status})",
            status=status,
        )


class MalformedResponseError(RecapError):
    """The assistant output was not structured as expected.

    Attributes:
        raw: The undecodable assistant text, when one was received.
    """

    def __init__(self, message: str, raw: str | None = None) -> None:
        self.raw = raw
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        if self.raw is not None:
            payload["raw"] = self.raw
        return payload


class SynthesisError(RecapError):
    """Speech synthesis of the voiceover script failed."""


# -- Client-side --------------------------------------------------------------


class NoContentError(RecapError):
    """A bundle was requested before any notes existed."""


class FileTypeError(RecapError):
    """An uploaded transcript file is not plain text or markdown."""


class RecapApiError(RecapError):
    """The recap server answered with a non-2xx status.

    Attributes:
        status_code: HTTP status returned by the server.
        body: Raw response body text.
    """

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Error {status_code}: {body}")
