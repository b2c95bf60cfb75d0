"""Git references as returned by the ``/git/refs`` endpoint."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


class RefKind(str, Enum):
    """Kind of a reference, keyed by its path prefix."""

    TAG = "refs/tags/"
    BRANCH = "refs/heads/"

    @classmethod
    def of(cls, path: str) -> Optional["RefKind"]:
        """Return the kind whose prefix ``path`` starts with, if any."""
        for kind in cls:
            if path.startswith(kind.value):
                return kind
        return None


@dataclass(frozen=True)
class Reference:
    """A named pointer to a commit."""
    kind: RefKind
    name: str
    target: str
    object_type: str = "commit"
    url: str = ""

    @property
    def ref(self) -> str:
        """Full ref path, e.g. ``refs/tags/1.0.0``."""
        return self.kind.value + self.name

    def to_dict(self) -> Dict[str, str]:
        return {
            "kind": self.kind.name.lower(),
            "name": self.name,
            "ref": self.ref,
            "target": self.target,
            "object_type": self.object_type,
            "url": self.url,
        }


def parse_ref(data: Dict[str, Any]) -> Optional[Reference]:
    """
    Parse one raw ref object.

    Args:
        data: Ref object from the API (``ref``, ``object.sha``, ...)

    Returns:
        Reference, or None for refs that are neither tags nor branches
        (``refs/pull/*``, ``refs/notes/*``)
    """
    path = data.get("ref", "")
    kind = RefKind.of(path)
    if kind is None:
        return None

    obj = data.get("object") or {}
    return Reference(
        kind=kind,
        name=path[len(kind.value):],
        target=obj.get("sha", ""),
        object_type=obj.get("type", "commit"),
        url=data.get("url", ""),
    )


def parse_refs(payload: Iterable[Dict[str, Any]]) -> List[Reference]:
    """Parse a list of raw refs, dropping the ones with unknown prefixes."""
    refs = []
    for data in payload:
        ref = parse_ref(data)
        if ref is not None:
            refs.append(ref)
    return refs


def partition(refs: Iterable[Reference]) -> Tuple[List[Reference], List[Reference]]:
    """Split references into ``(tags, branches)``, keeping their order."""
    tags: List[Reference] = []
    branches: List[Reference] = []
    for ref in refs:
        if ref.kind is RefKind.TAG:
            tags.append(ref)
        else:
            branches.append(ref)
    return tags, branches
