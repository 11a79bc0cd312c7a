"""
Build every target of the matrix and publish the binaries to a GitHub release.

The release is either the latest published release of the repository, or the
one named explicitly (for a workflow triggered by publishing a release, pass
--tag-env RELEASE_VERSION).

Usage:
    python -m crossrelease.ci
    python -m crossrelease.ci --tag v1.2.3
    python -m crossrelease.ci --tag-env RELEASE_VERSION
    python -m crossrelease.ci --target linux/arm64 --tag v1.2.3

Credentials:
    Create a .creds.json file in the project root (--project-root, default: the
    current working directory) with:
    {
        "github_token": "your_github_token_here"
    }

    Alternatively, set the GITHUB_TOKEN environment variable.
"""

import argparse
import sys

from .build.common import prepare_build
from .config import add_config_arguments, config_from_args, load_github_token
from .errors import ReleaseError
from .release import run_release
from .upload.github import GitHubClient
from .version import LatestReleaseResolver, ProvidedVersionResolver


def add_release_arguments(parser):
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--tag", help="Publish to this release tag instead of the latest release")
    group.add_argument("--tag-env", metavar="VAR", help="Read the release tag from this environment variable")


def get_resolver(args, client):
    if args.tag is not None:
        return ProvidedVersionResolver(args.tag, source="--tag")
    if args.tag_env:
        return ProvidedVersionResolver.from_env(args.tag_env)
    return LatestReleaseResolver(client)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Cross-compile the project and upload the binaries to a GitHub release",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    add_config_arguments(parser)
    add_release_arguments(parser)
    parser.add_argument("--dry-run", action="store_true", help="Build, but only show what would be uploaded and deleted")
    args = parser.parse_args(argv)

    try:
        config, cells = config_from_args(args)
    except (OSError, ValueError) as e:
        parser.error(str(e))
    if not cells:
        parser.error("The build matrix is empty")

    token = load_github_token(config.project_root)
    if not token and not config.dry_run:
        print("Error: GitHub token not provided.", file=sys.stderr)
        print("Create a .creds.json file in the project root with:", file=sys.stderr)
        print('  {"github_token": "your_github_token_here"}', file=sys.stderr)
        print("Or set the GITHUB_TOKEN environment variable.", file=sys.stderr)
        sys.exit(1)

    client = GitHubClient(config.repo, token, api_base=config.api_base, dry_run=config.dry_run)

    try:
        prepare_build(config)
    except ReleaseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    report = run_release(config, cells, get_resolver(args, client), client)
    report.print_summary(dry_run=config.dry_run)
    if report.fatal is not None:
        print(f"Error: {report.fatal}", file=sys.stderr)
    sys.exit(report.exit_code)


if __name__ == "__main__":
    main()
