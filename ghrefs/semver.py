"""Semantic versioning utilities (npm range rules)."""

import re
from typing import Optional

from semantic_version import NpmSpec, Version

from .exceptions import ParseError

_VERSION_PREFIX = re.compile(r"^\s*[=v]?\s*")
# Start of something that can only be a range, never a branch name.
_RANGE_START = re.compile(r"^\s*(?:[<>=~^]|v?\d|[xX*](?:$|[.\s|])|\|\|)")


def is_range(constraint: str) -> bool:
    """Check whether ``constraint`` is meant as a semver range.

    Bare words such as ``master`` or ``feature/login`` are branch names
    and never match a tag.

    Args:
        constraint: Version constraint string.

    Returns:
        True if the constraint should be parsed as a range.
    """
    return not constraint.strip() or bool(_RANGE_START.match(constraint))


def parse_version(version_str: str) -> Optional[Version]:
    """Parse a tag name into a Version.

    A single leading ``v`` or ``=`` is ignored, as in ``v1.2.3``.

    Args:
        version_str: Tag name.

    Returns:
        Parsed Version, or None if the name is not a full semver version.
    """
    cleaned = _VERSION_PREFIX.sub("", version_str, count=1).strip()
    try:
        return Version(cleaned)
    except ValueError:
        return None


def parse_range(constraint: str) -> Optional[NpmSpec]:
    """Parse a version range.

    Supports everything npm accepts:
    - Exact: "1.0.0" or "=1.0.0"
    - X-range: "1.x", "1.2.*", "*"
    - Caret: "^1.2.0"
    - Tilde: "~1.2.0"
    - Hyphen: "1.0.0 - 2.0.0"
    - Unions: ">=1.0.0 <1.5.0 || 2.x"

    Args:
        constraint: Version constraint string.

    Returns:
        NpmSpec, or None if the constraint is a plain branch name.

    Raises:
        ParseError: If the constraint looks like a range but is malformed.
    """
    if not is_range(constraint):
        return None

    expression = constraint.strip() or "*"
    try:
        return NpmSpec(expression)
    except ValueError as e:
        raise ParseError(constraint) from e


def matches(version: Version, spec: NpmSpec) -> bool:
    """Check if a version matches a range."""
    return spec.match(version)


def satisfies(name: str, spec: Optional[NpmSpec]) -> bool:
    """Check if a tag name satisfies a parsed range.

    Args:
        name: Tag name.
        spec: Parsed range, None for branch constraints.

    Returns:
        True if ``name`` is a valid version inside ``spec``.
    """
    if spec is None:
        return False
    version = parse_version(name)
    return version is not None and matches(version, spec)
