"""Pytest configuration and fixtures."""

import pytest

from ghrefs.config import ClientSettings
from ghrefs.refs import parse_refs


def raw_ref(path: str, sha: str = "", object_type: str = "commit") -> dict:
    """Build a ref object shaped like the ``/git/refs`` response."""
    return {
        "ref": path,
        "node_id": "MDM6UmVm",
        "url": f"https://api.github.com/repos/owner/repo/git/{path}",
        "object": {
            "sha": sha or f"sha-{path.rsplit('/', 1)[-1]}",
            "type": object_type,
            "url": "https://api.github.com/repos/owner/repo/git/commits/x",
        },
    }


@pytest.fixture
def settings() -> ClientSettings:
    """Settings that ignore the environment of the test run."""
    return ClientSettings(
        token=None,
        user=None,
        password=None,
        user_agent="ghrefs-tests",
        api_url="https://api.example.test",
        raw_url="https://raw.example.test",
    )


@pytest.fixture
def raw_refs() -> list:
    """Refs of a repository with three tags, two branches and a pull ref."""
    return [
        raw_ref("refs/heads/develop"),
        raw_ref("refs/heads/master"),
        raw_ref("refs/pull/7/head"),
        raw_ref("refs/tags/1.0.0"),
        raw_ref("refs/tags/1.1.0", object_type="tag"),
        raw_ref("refs/tags/2.0.0"),
    ]


@pytest.fixture
def refs(raw_refs):
    return parse_refs(raw_refs)
