"""Release tag resolution.

Two policies, chosen by whoever starts the run:

- ``LatestReleaseResolver`` asks GitHub for the latest published release of the
  repository and uses its ``tag_name``.
- ``ProvidedVersionResolver`` uses a value handed in from outside, typically the
  ``RELEASE_VERSION`` environment variable set by the workflow that was
  triggered by publishing the release.
"""

import os

from .errors import ResolutionError
from .upload.github import GitHubAPIError

RELEASE_VERSION_ENV = "RELEASE_VERSION"


class LatestReleaseResolver:
    def __init__(self, client):
        self.client = client

    def describe(self):
        return f"latest release of {self.client.repo}"

    def resolve(self):
        try:
            release = self.client.get_latest_release()
        except GitHubAPIError as e:
            raise ResolutionError(f"Could not fetch the latest release of {self.client.repo}: {e}") from e

        tag = release.get("tag_name") if isinstance(release, dict) else None
        if not isinstance(tag, str) or not tag.strip():
            raise ResolutionError(f"Latest release of {self.client.repo} has no tag_name")
        return tag.strip()


class ProvidedVersionResolver:
    def __init__(self, value, source="provided value"):
        self.value = value
        self.source = source

    @classmethod
    def from_env(cls, name=RELEASE_VERSION_ENV, environ=None):
        environ = os.environ if environ is None else environ
        return cls(environ.get(name), source=f"${name}")

    def describe(self):
        return self.source

    def resolve(self):
        if self.value is None or not self.value.strip():
            raise ResolutionError(f"No release version given ({self.source} is empty or not set)")
        return self.value.strip()
