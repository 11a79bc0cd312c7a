import os

from ..errors import PublishError
from ..matrix import artifact_name
from ..phase import run_phase
from .github import GitHubAPIError


def publish_cell(client, release, config, cell):
    """Upload the artifact of one cell to ``release``. Returns the asset name."""
    name = artifact_name(config.binary, cell)
    path = config.artifact_path(name)
    if not os.path.exists(path):
        raise PublishError(cell, f"Artifact {name} not found in {config.project_root}")

    print(f"[{cell}] Uploading {name} to {release['tag_name']}")
    try:
        client.upload_asset(release, path, name)
    except GitHubAPIError as e:
        raise PublishError(cell, str(e)) from e
    except OSError as e:
        raise PublishError(cell, f"Could not read {name}: {e}") from e
    return name


def publish_all(client, tag, config, cells):
    """Upload every cell's artifact to the release tagged ``tag``.

    The release is looked up once. Each cell's upload succeeds or fails on
    its own; a failed cell never stops the others.

    Returns:
        Tuple of (published, errors): dicts keyed by cell
    """
    if not tag:
        raise ValueError("Release tag must not be empty")

    print(f"Fetching release information for tag: {tag}")
    try:
        release = client.get_release_by_tag(tag)
    except GitHubAPIError as e:
        return {}, {cell: PublishError(cell, str(e)) for cell in cells}
    print(f"Release found: {release.get('name') or tag} (ID: {release['id']})")

    return run_phase(
        lambda cell: publish_cell(client, release, config, cell),
        cells,
        config.max_workers(cells),
        error_cls=PublishError,
    )
