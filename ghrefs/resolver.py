"""Resolve a version constraint to a tag or branch of a repository."""

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from .refs import Reference, partition
from .semver import parse_range, satisfies

if TYPE_CHECKING:
    from .client import GitHubClient

logger = logging.getLogger(__name__)


def find_tag(tags: Sequence[Reference], constraint: str) -> Optional[Reference]:
    """
    Find the first tag in ``tags`` whose name satisfies ``constraint``.

    The range is only parsed when there is a tag to test, so a malformed
    range against a repository without tags is not an error.

    Raises:
        ParseError: If the constraint is a malformed range
    """
    if not tags:
        return None

    spec = parse_range(constraint)
    for tag in tags:
        if satisfies(tag.name, spec):
            return tag
    return None


def find_branch(branches: Iterable[Reference], constraint: str) -> Optional[Reference]:
    """Find the branch named exactly ``constraint``."""
    for branch in branches:
        if branch.name == constraint:
            return branch
    return None


class Resolver:
    """
    Maps a version constraint to a concrete reference.

    Tags are preferred: the tag list is searched newest first and the first
    satisfying tag wins. Only when no tag matches is the constraint compared
    against branch names.
    """

    def __init__(self, client: "GitHubClient"):
        self.client = client

    def select(self, refs: Iterable[Reference], constraint: str) -> Optional[Reference]:
        """
        Select the reference for ``constraint`` from already fetched refs.

        Args:
            refs: References in API order (oldest tag first)
            constraint: Semver range or branch name

        Returns:
            Matching Reference, or None

        Raises:
            ParseError: If the constraint is a malformed range
        """
        tags, branches = partition(refs)
        tags.reverse()

        tag = find_tag(tags, constraint)
        if tag is not None:
            logger.debug(f"Constraint {constraint!r} matched tag {tag.name}")
            return tag

        branch = find_branch(branches, constraint)
        if branch is not None:
            logger.debug(f"Constraint {constraint!r} matched branch {branch.name}")
        else:
            logger.debug(
                f"Constraint {constraint!r} matched none of {len(tags)} tags "
                f"and {len(branches)} branches"
            )
        return branch

    async def resolve(self, repo: str, constraint: str) -> Optional[Reference]:
        """
        Resolve ``constraint`` against the refs of ``repo``.

        Args:
            repo: Repository as ``owner/name``
            constraint: Semver range or branch name

        Returns:
            Matching Reference, or None

        Raises:
            NetworkError: If the refs could not be fetched
            RateLimitError: If the API quota is exhausted
            ParseError: If the constraint is a malformed range
        """
        refs: List[Reference] = await self.client.refs(repo)
        return self.select(refs, constraint)
