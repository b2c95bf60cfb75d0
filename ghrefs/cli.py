# file: ghrefs/cli.py
# Command-line interface for the GitHub client

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from .client import GitHubClient
from .config import ClientSettings
from .exceptions import GitHubError


def print_json(data) -> None:
    print(json.dumps(data, indent=2))


def print_error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


# ==================== Commands ====================

async def cmd_lookup(client: GitHubClient, args) -> int:
    """Resolve a version constraint to a tag or branch."""
    ref = await client.lookup(args.repo, args.version)
    if ref is None:
        print_error(f"No tag or branch of {args.repo} matches {args.version!r}")
        return 2
    print_json(ref.to_dict())
    return 0


async def cmd_refs(client: GitHubClient, args) -> int:
    """List tags and branches."""
    refs = await client.refs(args.repo)
    print_json([ref.to_dict() for ref in refs])
    return 0


async def cmd_contents(client: GitHubClient, args) -> int:
    """Show file metadata from the contents endpoint."""
    contents = await client.contents(args.repo, args.ref, args.path)
    if isinstance(contents, list):
        print_json([entry.path for entry in contents])
    else:
        print_json({
            "name": contents.name,
            "path": contents.path,
            "sha": contents.sha,
            "size": contents.size,
            "download_url": contents.download_url,
        })
    return 0


async def cmd_cat(client: GitHubClient, args) -> int:
    """Write a raw file to stdout."""
    out = sys.stdout.buffer
    async for chunk in client.stream(args.repo, args.ref, args.path):
        out.write(chunk)
    out.flush()
    return 0


# ==================== Parser ====================

def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ghrefs",
        description="Resolve GitHub repository versions and read files at a reference",
        epilog="Credentials are read from GH_TOKEN or GH_USER / GH_PASSWORD.",
    )

    # Global options
    parser.add_argument("--api-url", help="REST API base URL")
    parser.add_argument("--user-agent", help="User-Agent header")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    lookup_parser = subparsers.add_parser("lookup", help="Resolve a semver range or branch name")
    lookup_parser.add_argument("repo", help="Repository as owner/name")
    lookup_parser.add_argument("version", help="Semver range or branch name")

    subparsers.add_parser("refs", help="List tags and branches").add_argument(
        "repo", help="Repository as owner/name"
    )

    for name, help_text in (("contents", "Show file metadata"), ("cat", "Print a raw file")):
        file_parser = subparsers.add_parser(name, help=help_text)
        file_parser.add_argument("repo", help="Repository as owner/name")
        file_parser.add_argument("ref", help="Tag, branch or commit")
        file_parser.add_argument("path", help="Path inside the repository")

    return parser


HANDLERS = {
    "lookup": cmd_lookup,
    "refs": cmd_refs,
    "contents": cmd_contents,
    "cat": cmd_cat,
}


async def run(argv: Optional[List[str]] = None, settings: Optional[ClientSettings] = None, transport=None) -> int:
    """Parse ``argv`` and run the selected command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    overrides = {}
    if args.api_url:
        overrides["api_url"] = args.api_url.rstrip("/")
    if args.user_agent:
        overrides["user_agent"] = args.user_agent
    settings = settings or ClientSettings()
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        async with GitHubClient(settings, transport=transport) as client:
            return await HANDLERS[args.command](client, args)
    except GitHubError as e:
        if args.verbose:
            logging.getLogger(__name__).exception("Command failed")
        print_error(str(e))
        return 1


def main():
    """Sync entry point."""
    sys.exit(asyncio.run(run()))
