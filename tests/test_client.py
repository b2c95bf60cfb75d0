"""
Tests for the GitHub Client.

Tests cover:
- Authentication headers
- Rate-limit detection and duration formatting
- refs / contents / stream / lookup against a mocked transport
- Error handling
"""

import base64
import time
import unittest

import httpx

from conftest import raw_ref
from ghrefs.client import (
    CredentialsAuth,
    FileContents,
    GitHubClient,
    format_duration,
    rate_limit,
)
from ghrefs.config import ClientSettings
from ghrefs.exceptions import (
    GitHubError,
    NetworkError,
    ParseError,
    RateLimitError,
    ResponseError,
)
from ghrefs.refs import RefKind


def make_settings(**overrides) -> ClientSettings:
    values = dict(
        token=None,
        user=None,
        password=None,
        user_agent="ghrefs-tests",
        api_url="https://api.example.test",
        raw_url="https://raw.example.test",
    )
    values.update(overrides)
    return ClientSettings(**values)


def quota_headers(remaining: int, limit: int = 60, reset: int = 0) -> dict:
    return {
        "x-ratelimit-limit": str(limit),
        "x-ratelimit-remaining": str(remaining),
        "x-ratelimit-reset": str(reset or int(time.time()) + 600),
    }


class RecordingHandler:
    """MockTransport handler answering from a path -> response table."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Not Found"}, headers=quota_headers(59))
        return route(request) if callable(route) else route


def make_client(routes, **overrides):
    handler = RecordingHandler(routes)
    client = GitHubClient(make_settings(**overrides), transport=httpx.MockTransport(handler))
    return client, handler


class TestFormatDuration(unittest.TestCase):
    """Test long-form duration formatting."""

    def test_units(self):
        self.assertEqual(format_duration(1000), "1 second")
        self.assertEqual(format_duration(10 * 1000), "10 seconds")
        self.assertEqual(format_duration(60 * 1000), "1 minute")
        self.assertEqual(format_duration(3 * 60 * 60 * 1000), "3 hours")
        self.assertEqual(format_duration(24 * 60 * 60 * 1000), "1 day")

    def test_rounding(self):
        # below 1.5 units floors and stays singular, above ceils
        self.assertEqual(format_duration(80 * 1000), "1 minute")
        self.assertEqual(format_duration(100 * 1000), "2 minutes")

    def test_small_and_negative(self):
        self.assertEqual(format_duration(250), "250 ms")
        self.assertEqual(format_duration(-5000), "0 ms")


class TestAuth(unittest.TestCase):
    """Test authentication header construction."""

    def test_no_credentials(self):
        client = GitHubClient(make_settings())
        self.assertEqual(client.headers(), {"User-Agent": "ghrefs-tests"})

    def test_token(self):
        client = GitHubClient(make_settings(token="secret"))
        self.assertEqual(client.headers()["Authorization"], "Bearer secret")

    def test_basic(self):
        client = GitHubClient(make_settings(user="alice", password="pw"))
        expected = base64.b64encode(b"alice:pw").decode()
        self.assertEqual(client.headers()["Authorization"], f"Basic {expected}")

    def test_basic_overrides_token(self):
        auth = CredentialsAuth(token="secret", user="alice", password="pw")
        self.assertTrue(auth.authorization.startswith("Basic "))

    def test_user_without_password(self):
        auth = CredentialsAuth(token="secret", user="alice")
        self.assertEqual(auth.authorization, "Bearer secret")


class TestRateLimit(unittest.TestCase):
    """Test rate-limit header parsing."""

    def test_parse(self):
        response = httpx.Response(200, headers=quota_headers(0, limit=5000, reset=1700000000))
        quota = rate_limit(response)
        self.assertEqual(quota.limit, 5000)
        self.assertEqual(quota.remaining, 0)
        self.assertEqual(int(quota.reset.timestamp()), 1700000000)
        self.assertTrue(quota.exhausted)

    def test_missing_headers(self):
        quota = rate_limit(httpx.Response(200))
        self.assertIsNone(quota.remaining)
        self.assertFalse(quota.exhausted)

    def test_garbage_headers(self):
        quota = rate_limit(httpx.Response(200, headers={"x-ratelimit-remaining": "n/a"}))
        self.assertIsNone(quota.remaining)


class TestGitHubClientAsync(unittest.IsolatedAsyncioTestCase):
    """Async tests for GitHubClient."""

    async def test_refs(self):
        """Test refs are fetched, authenticated and parsed."""
        client, handler = make_client(
            {
                "/repos/owner/repo/git/refs": httpx.Response(
                    200,
                    json=[raw_ref("refs/heads/master"), raw_ref("refs/tags/1.0.0"), raw_ref("refs/pull/1/head")],
                    headers=quota_headers(59),
                ),
            },
            token="secret",
        )
        async with client:
            refs = await client.refs("owner/repo")

        self.assertEqual([r.name for r in refs], ["master", "1.0.0"])
        self.assertIs(refs[1].kind, RefKind.TAG)
        request = handler.requests[0]
        self.assertEqual(request.headers["Authorization"], "Bearer secret")
        self.assertEqual(request.headers["User-Agent"], "ghrefs-tests")

    async def test_rate_limit_exhausted(self):
        """Test an exhausted quota raises RateLimitError."""
        client, _ = make_client({
            "/repos/owner/repo/git/refs": httpx.Response(403, json={"message": "API rate limit exceeded"},
                                                         headers=quota_headers(0, limit=60)),
        })
        async with client:
            with self.assertRaises(RateLimitError) as ctx:
                await client.refs("owner/repo")

        self.assertEqual(ctx.exception.limit, 60)
        self.assertEqual(str(ctx.exception), "ratelimit of 60 requests exceeded, resets in 10 minutes")

    async def test_rate_limit_checked_before_body(self):
        """Test the quota is checked even on a successful response."""
        client, _ = make_client({
            "/repos/owner/repo/git/refs": httpx.Response(200, json=[], headers=quota_headers(0)),
        })
        async with client:
            with self.assertRaises(RateLimitError):
                await client.refs("owner/repo")

    async def test_not_found(self):
        """Test error statuses raise ResponseError."""
        client, _ = make_client({})
        async with client:
            with self.assertRaises(ResponseError) as ctx:
                await client.refs("owner/missing")

        self.assertEqual(ctx.exception.status_code, 404)
        self.assertIn("Not Found", str(ctx.exception))

    async def test_network_error(self):
        """Test transport failures raise NetworkError."""
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client({"/repos/owner/repo/git/refs": fail})
        async with client:
            with self.assertRaises(NetworkError) as ctx:
                await client.refs("owner/repo")

        self.assertIsInstance(ctx.exception, GitHubError)
        self.assertIsInstance(ctx.exception.__cause__, httpx.ConnectError)

    async def test_contents_file(self):
        """Test file contents are decoded."""
        body = base64.b64encode(b'{"name": "tip"}').decode()
        client, handler = make_client({
            "/repos/owner/repo/contents/component.json": httpx.Response(
                200,
                json={
                    "name": "component.json",
                    "path": "component.json",
                    "sha": "abc",
                    "size": 15,
                    "type": "file",
                    "encoding": "base64",
                    "content": body,
                    "download_url": "https://raw.example.test/owner/repo/1.0.0/component.json",
                },
                headers=quota_headers(58),
            ),
        })
        async with client:
            contents = await client.contents("owner/repo", "1.0.0", "component.json")

        self.assertIsInstance(contents, FileContents)
        self.assertEqual(contents.decoded, b'{"name": "tip"}')
        self.assertEqual(handler.requests[0].url.params["ref"], "1.0.0")

    async def test_contents_directory(self):
        """Test directory listings return one entry per file."""
        client, _ = make_client({
            "/repos/owner/repo/contents/lib": httpx.Response(
                200,
                json=[
                    {"name": "a.py", "path": "lib/a.py", "sha": "1", "type": "file"},
                    {"name": "sub", "path": "lib/sub", "sha": "2", "type": "dir"},
                ],
                headers=quota_headers(58),
            ),
        })
        async with client:
            entries = await client.contents("owner/repo", "master", "lib")

        self.assertEqual([e.path for e in entries], ["lib/a.py", "lib/sub"])
        self.assertEqual(entries[1].type, "dir")

    async def test_stream(self):
        """Test raw files are streamed from the raw host."""
        client, handler = make_client(
            {"/owner/repo/1.0.0/README.md": httpx.Response(200, content=b"# tip\n")},
            user="alice",
            password="pw",
        )
        async with client:
            chunks = [chunk async for chunk in client.stream("owner/repo", "1.0.0", "README.md")]

        self.assertEqual(b"".join(chunks), b"# tip\n")
        request = handler.requests[0]
        self.assertEqual(request.url.host, "raw.example.test")
        self.assertTrue(request.headers["Authorization"].startswith("Basic "))

    async def test_stream_missing(self):
        """Test a missing raw file raises ResponseError."""
        client, _ = make_client({})
        async with client:
            with self.assertRaises(ResponseError):
                async for _ in client.stream("owner/repo", "master", "nope.txt"):
                    pass

    async def test_lookup(self):
        """Test lookup resolves through the refs endpoint."""
        client, _ = make_client({
            "/repos/owner/repo/git/refs": httpx.Response(
                200,
                json=[raw_ref("refs/heads/master"), raw_ref("refs/tags/1.0.0"), raw_ref("refs/tags/2.0.0")],
                headers=quota_headers(59),
            ),
        })
        async with client:
            self.assertEqual((await client.lookup("owner/repo", "1.x")).name, "1.0.0")
            self.assertEqual((await client.lookup("owner/repo", "master")).kind, RefKind.BRANCH)
            self.assertIsNone(await client.lookup("owner/repo", "3.x"))
            with self.assertRaises(ParseError):
                await client.lookup("owner/repo", ">=1.0.0 <<2")

    async def test_close_reopens(self):
        """Test the HTTP client is recreated after close."""
        client, _ = make_client({})
        first = await client._get_client()
        await client.close()
        self.assertIsNone(client._client)
        second = await client._get_client()
        self.assertIsNot(first, second)
        await client.close()
