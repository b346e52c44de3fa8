"""
Asynchronous HTTP client for the VoiceRelay backend.

Uses a short-lived ``httpx.AsyncClient`` per call so the client can be
driven from ``asyncio.run()`` inside Streamlit reruns.
"""

import logging

import httpx

from voicerelay.core.models import AudioPayload

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network".
    Used by the UI to display appropriate error messages.
    """

    def __init__(self, message: str, category: str = "unknown", status_code: int | None = None) -> None:
        self.message = message
        self.category = category
        self.status_code = status_code
        super().__init__(message)


class RelayClient:
    """Thin wrapper around httpx for calling the relay.

    All methods return parsed JSON dicts or raise ``APIError`` carrying the
    relay's ``details`` message when there is one.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the relay.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.request(method, path, **kwargs)
                resp.raise_for_status()
                return resp
        except httpx.ConnectError:
            raise APIError(
                f"Relay server is not reachable at {self._base_url}.",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. The server may be overloaded.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                detail = exc.response.json().get("details") or "Transcription failed"
            except Exception:
                detail = "Transcription failed"
            raise APIError(
                str(detail), category="http", status_code=exc.response.status_code
            ) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    async def health_check(self) -> dict:
        return (await self._request("GET", "/health")).json()

    async def check_connection(self) -> tuple[bool, str]:
        """Check if the relay is reachable. Returns (ok, message)."""
        try:
            await self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- transcription --

    async def transcribe(self, payload: AudioPayload) -> dict:
        """Upload one recording as the multipart ``audio`` field."""
        files = {"audio": (payload.filename, payload.data, payload.mime_type)}
        logger.debug("Uploading %s (%d bytes)", payload.filename, len(payload.data))
        return (await self._request("POST", "/transcribe", files=files)).json()
