"""
ContentClient SDK: sync client for quota-gate.

Used by front ends and scripts to browse the catalog and open items while
respecting the reader's membership quota.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

import httpx

from quota_gate.common.exceptions import (
    ERROR_MESSAGES,
    NETWORK_ERROR,
    NOT_FOUND,
    QUOTA_EXCEEDED,
    UNKNOWN_ERROR,
)


class ApiError(Exception):
    """Failure returned by the API, or a transport failure (``status_code`` 0)."""

    def __init__(
        self,
        code: str,
        message: str = "",
        status_code: int = 0,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, "")
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    @property
    def fields(self) -> dict[str, str]:
        """Per-field messages of a ``VALIDATION_ERROR``."""
        return self.details.get("fields", {})


@dataclass
class ClientUsage:
    """Usage of one content type. ``limit`` and ``remaining`` are None when unlimited."""

    count: int = 0
    limit: Optional[int] = None
    remaining: Optional[int] = None
    unlimited: bool = False


@dataclass
class ClientListing:
    items: list[dict[str, Any]] = field(default_factory=list)
    accessed_ids: list[str] = field(default_factory=list)
    usage: ClientUsage = field(default_factory=ClientUsage)


@dataclass
class ClientDetail:
    item: dict[str, Any]
    usage: ClientUsage = field(default_factory=ClientUsage)


class DetailState(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    QUOTA_EXCEEDED = "quota_exceeded"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass
class DetailResult:
    """Terminal outcome of one detail request. Retrying starts a new request."""

    state: DetailState
    detail: Optional[ClientDetail] = None
    error: Optional[ApiError] = None


class ContentClient:
    """
    Synchronous HTTP client for quota-gate.

    Every call is a single request. Failures are raised as ``ApiError`` and
    are never retried.
    """

    def __init__(
        self,
        server_url: str = "http://localhost:3001",
        session_token: Optional[str] = None,
        api_prefix: str = "/api",
        timeout: int = 30,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_prefix = api_prefix.rstrip("/")
        headers = {}
        if session_token:
            headers["Authorization"] = f"Bearer {session_token}"
        self._http = httpx.Client(
            base_url=self.server_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def _request(self, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            resp = self._http.get(f"{self.api_prefix}{path}", **kwargs)
        except httpx.HTTPError as e:
            raise ApiError(NETWORK_ERROR, status_code=0, details={"reason": str(e)}) from e

        try:
            body = resp.json()
        except ValueError:
            # Covers JSONDecodeError and undecodable (non-UTF) bodies.
            raise ApiError(UNKNOWN_ERROR, status_code=resp.status_code) from None

        if resp.status_code >= 400:
            error = body.get("error") if isinstance(body, dict) else None
            if not isinstance(error, dict) or "code" not in error:
                raise ApiError(UNKNOWN_ERROR, status_code=resp.status_code)
            raise ApiError(
                error["code"],
                error.get("message", ""),
                status_code=resp.status_code,
                details=error.get("details"),
            )
        if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
            raise ApiError(UNKNOWN_ERROR, status_code=resp.status_code)
        return body

    @staticmethod
    def _parse_usage(data: Optional[dict]) -> ClientUsage:
        data = data or {}
        if not isinstance(data, dict):
            raise ApiError(UNKNOWN_ERROR, "Malformed usage in response", status_code=200)
        return ClientUsage(
            count=data.get("count", 0),
            limit=data.get("limit"),
            remaining=data.get("remaining"),
            unlimited=data.get("unlimited", False),
        )

    def _listing(self, path: str, limit: Optional[int]) -> ClientListing:
        params = {"limit": limit} if limit is not None else None
        data = self._request(path, params=params)["data"]
        return ClientListing(
            items=data.get("items", []),
            accessed_ids=data.get("accessedIds", []),
            usage=self._parse_usage(data.get("usage")),
        )

    def _detail(self, path: str) -> ClientDetail:
        body = self._request(path)
        return ClientDetail(item=body["data"], usage=self._parse_usage(body.get("usage")))

    # ── Catalog ──

    def list_articles(self, limit: Optional[int] = None) -> ClientListing:
        return self._listing("/articles", limit)

    def list_videos(self, limit: Optional[int] = None) -> ClientListing:
        return self._listing("/videos", limit)

    def get_article(self, article_id: str) -> ClientDetail:
        """Open an article. Spends one article slot unless already read."""
        return self._detail(f"/articles/{article_id}")

    def get_video(self, video_id: str) -> ClientDetail:
        """Open a video. Spends one video slot unless already watched."""
        return self._detail(f"/videos/{video_id}")

    # ── Account ──

    def get_profile(self) -> dict[str, Any]:
        return self._request("/user/profile")["data"]

    def get_usage(self) -> dict[str, Any]:
        return self._request("/user/usage")["data"]

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


_ERROR_STATES = {
    QUOTA_EXCEEDED: DetailState.QUOTA_EXCEEDED,
    NOT_FOUND: DetailState.NOT_FOUND,
}


def fetch_detail(
    fetch: Callable[[str], ClientDetail],
    content_id: str,
    on_state: Optional[Callable[[DetailState], None]] = None,
) -> DetailResult:
    """Run one detail request through ``loading`` to a terminal state.

    ``fetch`` is ``client.get_article`` or ``client.get_video``. ``on_state``
    is told about every transition, starting with ``LOADING``.
    """
    if on_state:
        on_state(DetailState.LOADING)
    try:
        result = DetailResult(DetailState.SUCCESS, detail=fetch(content_id))
    except ApiError as e:
        result = DetailResult(_ERROR_STATES.get(e.code, DetailState.ERROR), error=e)
    if on_state:
        on_state(result.state)
    return result
