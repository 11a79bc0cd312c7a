"""
Upload already built binaries to a GitHub release, then delete them locally.

Usage:
    python -m crossrelease.upload --tag v1.0.0
    python -m crossrelease.upload --tag v1.0.0 --target linux/arm64 --keep
    python -m crossrelease.upload --tag-env RELEASE_VERSION --dry-run

An asset that already exists on the release is reported as an error and is
never replaced.
"""

import argparse
import sys

from ..cleanup import cleanup_all
from ..config import add_config_arguments, config_from_args, load_github_token
from ..errors import ReleaseError
from ..version import ProvidedVersionResolver
from .common import publish_all
from .github import GitHubClient


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Upload built binaries to a GitHub release",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    add_config_arguments(parser)
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--tag", help="GitHub release tag (e.g., v1.0.0)")
    group.add_argument("--tag-env", metavar="VAR", help="Read the release tag from this environment variable")
    parser.add_argument("--keep", action="store_true", help="Do not delete the binaries after uploading")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be uploaded without actually uploading")
    args = parser.parse_args(argv)

    try:
        config, cells = config_from_args(args)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    if args.tag is not None:
        resolver = ProvidedVersionResolver(args.tag, source="--tag")
    else:
        resolver = ProvidedVersionResolver.from_env(args.tag_env)
    try:
        tag = resolver.resolve()
    except ReleaseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    token = load_github_token(config.project_root)
    if not token and not config.dry_run:
        print("Error: GitHub token not provided.", file=sys.stderr)
        print("Create a .creds.json file or set the GITHUB_TOKEN environment variable.", file=sys.stderr)
        sys.exit(1)

    client = GitHubClient(config.repo, token, api_base=config.api_base, dry_run=config.dry_run)
    published, errors = publish_all(client, tag, config, cells)
    for error in errors.values():
        print(f"Error: {error}", file=sys.stderr)

    if published and not args.keep:
        cleanup_all(config, list(published))

    print(f"\n{'='*60}")
    print("Summary:")
    print(f"  Files uploaded: {len(published)}")
    print(f"  Files failed: {len(errors)}")
    if args.dry_run:
        print("\n  This was a DRY RUN - no files were actually uploaded")
    print(f"{'='*60}")

    if errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
