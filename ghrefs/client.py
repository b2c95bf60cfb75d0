"""
GitHub Client
Async HTTP client for the parts of the GitHub REST API needed to pin a
repository to a version.

Provides:
- Authentication (Bearer token or Basic credentials)
- Rate-limit detection
- References (tags and branches)
- File contents and raw file streaming
- Version lookup (semver range or branch name)
"""

import base64
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Generator, List, Optional, Union

import httpx

from .config import ClientSettings, get_settings
from .exceptions import NetworkError, RateLimitError, ResponseError
from .refs import Reference, parse_refs
from .resolver import Resolver

# =================== Data Classes ===================


@dataclass
class RateLimit:
    """Request quota read from ``x-ratelimit-*`` response headers."""
    limit: Optional[int] = None
    remaining: Optional[int] = None
    reset: Optional[datetime] = None

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0


@dataclass
class FileContents:
    """A file or directory entry from the contents endpoint."""
    name: str
    path: str
    sha: str
    size: int = 0
    type: str = "file"
    encoding: str = ""
    content: str = ""
    download_url: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "FileContents":
        return cls(
            name=data.get("name", ""),
            path=data.get("path", ""),
            sha=data.get("sha", ""),
            size=data.get("size", 0),
            type=data.get("type", "file"),
            encoding=data.get("encoding") or "",
            content=data.get("content") or "",
            download_url=data.get("download_url"),
        )

    @property
    def decoded(self) -> bytes:
        """File body, base64 decoded when the API encoded it."""
        if self.encoding == "base64":
            return base64.b64decode(self.content)
        return self.content.encode()


# =================== Helpers ===================

SECOND = 1000
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR


def _plural(ms: float, unit: int, name: str) -> Optional[str]:
    if ms < unit:
        return None
    if ms < unit * 1.5:
        return f"{math.floor(ms / unit)} {name}"
    return f"{math.ceil(ms / unit)} {name}s"


def format_duration(ms: float) -> str:
    """
    Format milliseconds in long form, e.g. ``"10 minutes"`` or ``"1 hour"``.

    Negative durations count as zero.
    """
    ms = max(ms, 0)
    for unit, name in ((DAY, "day"), (HOUR, "hour"), (MINUTE, "minute"), (SECOND, "second")):
        text = _plural(ms, unit, name)
        if text:
            return text
    return f"{int(ms)} ms"


def _int_header(headers: httpx.Headers, name: str) -> Optional[int]:
    value = headers.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def rate_limit(response: httpx.Response) -> RateLimit:
    """Read the rate-limit headers of ``response``."""
    reset = _int_header(response.headers, "x-ratelimit-reset")
    return RateLimit(
        limit=_int_header(response.headers, "x-ratelimit-limit"),
        remaining=_int_header(response.headers, "x-ratelimit-remaining"),
        reset=datetime.fromtimestamp(reset, tz=timezone.utc) if reset is not None else None,
    )


def basic(user: str, password: str) -> str:
    """Return base64 encoded Basic credentials."""
    return base64.b64encode(f"{user}:{password}".encode()).decode()


# =================== Credentials Auth ===================


class CredentialsAuth(httpx.Auth):
    """Auth handler setting a Bearer token or Basic credentials."""

    def __init__(
        self,
        token: Optional[str] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
    ):
        self.token = token
        self.user = user
        self.password = password

    @property
    def authorization(self) -> Optional[str]:
        # Basic credentials take precedence over a token
        if self.user and self.password:
            return f"Basic {basic(self.user, self.password)}"
        if self.token:
            return f"Bearer {self.token}"
        return None

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        authorization = self.authorization
        if authorization:
            request.headers["Authorization"] = authorization
        yield request


# =================== GitHub Client ===================


class GitHubClient:
    """
    Async client for the GitHub REST API.

    Provides methods for:
    - Listing references
    - Reading file contents at a reference
    - Streaming raw files
    - Looking up the reference matching a version constraint

    Requests are never retried or cached; every error propagates.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Client configuration, the global settings if omitted
            transport: Optional httpx transport (used by tests)
        """
        self.settings = settings or get_settings()
        self.auth = CredentialsAuth(
            token=self.settings.token,
            user=self.settings.user,
            password=self.settings.password,
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.logger = logging.getLogger(__name__)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.settings.api_url,
                headers={"User-Agent": self.settings.user_agent},
                timeout=httpx.Timeout(self.settings.timeout),
                auth=self.auth,
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def headers(self) -> Dict[str, str]:
        """Headers sent with every request."""
        headers = {"User-Agent": self.settings.user_agent}
        authorization = self.auth.authorization
        if authorization:
            headers["Authorization"] = authorization
        return headers

    # =================== Transport ===================

    def _check_rate_limit(self, response: httpx.Response) -> None:
        """
        Raise if the response reports an exhausted quota.

        Raises:
            RateLimitError: If ``x-ratelimit-remaining`` is 0
        """
        quota = rate_limit(response)
        if not quota.exhausted:
            return

        if quota.reset is not None:
            delta = quota.reset - datetime.now(timezone.utc)
            duration = format_duration(delta.total_seconds() * 1000)
        else:
            duration = "an unknown time"
        self.logger.warning(f"Rate limit of {quota.limit} requests exhausted, resets in {duration}")
        raise RateLimitError(quota.limit or 0, quota.reset, duration)

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            message = response.json().get("message", response.reason_phrase)
        except (ValueError, AttributeError):
            message = response.reason_phrase
        raise ResponseError(message, response.status_code)

    async def get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        GET ``path`` from the API and decode the JSON body.

        Args:
            path: API path, e.g. ``/repos/owner/name/git/refs``
            params: Optional query parameters

        Returns:
            Decoded JSON

        Raises:
            NetworkError: If the request could not be sent
            RateLimitError: If the API quota is exhausted
            ResponseError: If the API answers with an error status
        """
        client = await self._get_client()
        self.logger.debug(f"GET {path} {params or ''}")
        try:
            response = await client.get(path, params=params)
        except httpx.RequestError as e:
            raise NetworkError(f"Connection failed: {e}") from e

        self._check_rate_limit(response)
        self._raise_for_status(response)

        try:
            return response.json()
        except ValueError as e:
            raise ResponseError(f"Invalid JSON body: {e}", response.status_code) from e

    # =================== Repository ===================

    async def refs(self, repo: str) -> List[Reference]:
        """
        Get all tags and branches of ``repo``.

        Args:
            repo: Repository as ``owner/name``

        Returns:
            References in API order
        """
        payload = await self.get(f"/repos/{repo}/git/refs")
        refs = parse_refs(payload)
        self.logger.debug(f"{repo}: {len(refs)} refs")
        return refs

    async def contents(
        self, repo: str, ref: str, path: str
    ) -> Union[FileContents, List[FileContents]]:
        """
        Get contents of ``path`` at ``ref``.

        Args:
            repo: Repository as ``owner/name``
            ref: Tag, branch or commit sha
            path: Path inside the repository

        Returns:
            FileContents for a file, a list of entries for a directory
        """
        payload = await self.get(f"/repos/{repo}/contents/{path.lstrip('/')}", params={"ref": ref})
        if isinstance(payload, list):
            return [FileContents.from_api(entry) for entry in payload]
        return FileContents.from_api(payload)

    async def stream(
        self, repo: str, ref: str, path: str, chunk_size: int = 64 * 1024
    ) -> AsyncIterator[bytes]:
        """
        Stream the raw bytes of ``path`` at ``ref``.

        Args:
            repo: Repository as ``owner/name``
            ref: Tag, branch or commit sha
            path: Path inside the repository
            chunk_size: Size of the yielded chunks

        Yields:
            File body chunks

        Raises:
            NetworkError: If the request could not be sent
            ResponseError: If the file could not be served
        """
        url = f"{self.settings.raw_url}/{repo}/{ref}/{path.lstrip('/')}"
        client = await self._get_client()
        self.logger.debug(f"GET {url}")
        try:
            async with client.stream("GET", url) as response:
                if not response.is_success:
                    raise ResponseError(response.reason_phrase, response.status_code)
                async for chunk in response.aiter_bytes(chunk_size):
                    yield chunk
        except httpx.RequestError as e:
            raise NetworkError(f"Connection failed: {e}") from e

    async def lookup(self, repo: str, version: str) -> Optional[Reference]:
        """
        Look up the reference of ``repo`` matching ``version``.

            await gh.lookup("component/tip", "1.x")

        Args:
            repo: Repository as ``owner/name``
            version: Semver range or branch name

        Returns:
            Matching tag or branch, or None
        """
        return await Resolver(self).resolve(repo, version)
