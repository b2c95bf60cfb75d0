"""Thin async GitHub client resolving semver ranges to tags and branches."""

from .client import CredentialsAuth, FileContents, GitHubClient, RateLimit, format_duration
from .config import ClientSettings, get_settings
from .exceptions import GitHubError, NetworkError, ParseError, RateLimitError, ResponseError
from .refs import Reference, RefKind, parse_ref, parse_refs, partition
from .resolver import Resolver, find_branch, find_tag

__version__ = "0.1.0"

__all__ = [
    "ClientSettings",
    "CredentialsAuth",
    "FileContents",
    "GitHubClient",
    "GitHubError",
    "NetworkError",
    "ParseError",
    "RateLimit",
    "RateLimitError",
    "Reference",
    "RefKind",
    "Resolver",
    "ResponseError",
    "find_branch",
    "find_tag",
    "format_duration",
    "get_settings",
    "parse_ref",
    "parse_refs",
    "partition",
]
