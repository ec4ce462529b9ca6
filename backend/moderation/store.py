"""
Idea store abstraction used by the moderation queue.

The queue only needs two things from the store: the list of submitted ideas
and a single-row partial update. HttpIdeaStore provides both by calling the
admin API over httpx.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from core.correlation import get_correlation_id
from models.schemas import AuthContext, Idea

PENDING_IDEAS_PATH = "/api/admin/ideas/pending"
IDEA_PATH = "/api/admin/ideas/{idea_id}"
CURRENT_PROFILE_PATH = "/api/profiles/me"

_ideas_adapter = TypeAdapter(list[Idea])


class IdeaStoreError(Exception):
    """
    A failed store call, shaped like a relational store's error report.

    Attributes:
        message: Human-readable description.
        status_code: HTTP status, when the store answered at all.
        code: Machine-readable error code.
        details: Extra diagnostic text.
        hint: Suggested fix, when the store offers one.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        text = self.message
        if self.details:
            text += f": {self.details}"
        if self.hint:
            text += f" (Hint: {self.hint})"
        if self.code:
            text += f" [Code: {self.code}]"
        return text


class IdeaStore(ABC):
    """Abstract interface for the backing idea store."""

    @abstractmethod
    async def fetch_pending(self) -> list[Idea]:
        """
        Fetch every idea awaiting moderation, with author and files.

        Raises:
            IdeaStoreError: If the call fails or the payload is malformed.
        """

    @abstractmethod
    async def update_idea(self, idea_id: int, changes: dict[str, Any]) -> None:
        """
        Apply a partial update (status and/or is_featured) to one idea.

        Raises:
            IdeaStoreError: If the store rejects or fails the update.
        """


def error_from_response(response: httpx.Response) -> IdeaStoreError:
    """Build an IdeaStoreError from a response that is not a 2xx."""
    text = response.text
    try:
        body = response.json() if text else None
    except ValueError:
        body = None

    message = f"Request failed with status {response.status_code}"
    code = details = hint = None

    if isinstance(body, dict):
        detail = body.get("detail", body.get("message", body.get("error")))
        if isinstance(detail, str):
            message = detail
        elif detail is not None:
            # FastAPI validation errors arrive as a list of dicts
            message = "Validation failed"
            details = json.dumps(detail)
        code = body.get("code")
        details = body.get("details", details)
        hint = body.get("hint")
    elif text:
        details = text

    return IdeaStoreError(
        message,
        status_code=response.status_code,
        code=code,
        details=details,
        hint=hint,
    )


class HttpIdeaStore(IdeaStore):
    """IdeaStore backed by the showcase admin API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: API root, e.g. ``http://localhost:8000``
            token: Admin bearer token
            timeout: Seconds per request; None waits indefinitely
            transport: Custom httpx transport (tests)
        """
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "HttpIdeaStore":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = {}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id

        try:
            response = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"Idea store timeout on {method} {url}")
            raise IdeaStoreError("Request timed out", code="timeout", details=str(e))
        except httpx.DecodingError as e:
            logger.warning(f"Idea store sent an undecodable body on {method} {url}: {e}")
            raise IdeaStoreError(
                "Idea store response could not be decoded",
                code="malformed_response",
                details=str(e),
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Idea store unreachable on {method} {url}: {e}")
            raise IdeaStoreError(
                "Could not reach the idea store", code="network_error", details=str(e)
            )

        # Redirects are not followed, so a 3xx is not a confirmation either
        if not response.is_success:
            error = error_from_response(response)
            logger.warning(f"Idea store {method} {url} failed: {error}")
            raise error
        return response

    async def fetch_pending(self) -> list[Idea]:
        response = await self._request("GET", PENDING_IDEAS_PATH)

        try:
            payload = response.json()
        except ValueError:
            raise IdeaStoreError(
                "Pending ideas response is not valid JSON",
                status_code=response.status_code,
                code="malformed_response",
                details=response.text[:500],
            )

        if not isinstance(payload, dict) or not isinstance(payload.get("ideas"), list):
            raise IdeaStoreError(
                "Pending ideas response has no 'ideas' list",
                status_code=response.status_code,
                code="malformed_response",
            )

        try:
            return _ideas_adapter.validate_python(payload["ideas"])
        except ValidationError as e:
            raise IdeaStoreError(
                "Pending ideas response has unexpected idea records",
                status_code=response.status_code,
                code="malformed_response",
                details=str(e),
            )

    async def update_idea(self, idea_id: int, changes: dict[str, Any]) -> None:
        await self._request(
            "PATCH", IDEA_PATH.format(idea_id=idea_id), json=changes
        )

    async def fetch_caller(self) -> AuthContext:
        """
        Ask the API who the bearer token belongs to.

        The role comes from the stored profile, so a queue built from this
        context enforces the same admin rule the API does.

        Raises:
            IdeaStoreError: If the token is rejected or the payload is malformed.
        """
        response = await self._request("GET", CURRENT_PROFILE_PATH)
        try:
            return AuthContext.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise IdeaStoreError(
                "Current profile response is malformed",
                status_code=response.status_code,
                code="malformed_response",
                details=str(e),
            )
