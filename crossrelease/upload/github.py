import os
from pathlib import Path
from typing import Dict, Optional

import requests

from ..config import DEFAULT_API_BASE


class GitHubAPIError(Exception):
    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class ReleaseNotFound(GitHubAPIError):
    pass


class AssetConflict(GitHubAPIError):
    pass


def _describe(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    message = body.get("message") if isinstance(body, dict) else None
    if not message:
        message = response.text[:200].strip() or response.reason
    return f"HTTP {response.status_code}: {message}"


class GitHubClient:
    def __init__(self, repo: str, token: Optional[str] = None, api_base: str = DEFAULT_API_BASE, dry_run: bool = False):
        self.repo = repo
        self.token = token
        self.dry_run = dry_run
        self.api_base = api_base.rstrip("/")
        self.headers = {"Accept": "application/vnd.github.v3+json"}
        if token:
            self.headers["Authorization"] = f"token {token}"

    def get_latest_release(self) -> Dict:
        """Get the most recent published (non-draft, non-prerelease) release."""
        url = f"{self.api_base}/repos/{self.repo}/releases/latest"
        try:
            response = requests.get(url, headers=self.headers)
        except requests.exceptions.RequestException as e:
            raise GitHubAPIError(f"Could not reach {url}: {e}") from e

        if response.status_code == 404:
            raise ReleaseNotFound(f"No published release found in {self.repo}", 404)
        if not response.ok:
            raise GitHubAPIError(f"Fetching latest release failed: {_describe(response)}", response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Latest release response is not JSON: {e}") from e

    def get_release_by_tag(self, tag: str) -> Dict:
        """Get release information by tag name."""
        url = f"{self.api_base}/repos/{self.repo}/releases/tags/{tag}"
        try:
            response = requests.get(url, headers=self.headers)
        except requests.exceptions.RequestException as e:
            raise GitHubAPIError(f"Could not reach {url}: {e}") from e

        if response.status_code == 404:
            raise ReleaseNotFound(f"Release with tag '{tag}' not found in {self.repo}", 404)
        if not response.ok:
            raise GitHubAPIError(f"Fetching release '{tag}' failed: {_describe(response)}", response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Release '{tag}' response is not JSON: {e}") from e

    def upload_asset(self, release: Dict, file_path: Path, asset_name: str):
        """Upload a file as a release asset.

        GitHub rejects an asset name that already exists on the release with
        422; that is raised as ``AssetConflict`` and never overwritten.
        """
        file_path = Path(file_path)
        if self.dry_run:
            print(f"  [DRY-RUN] Would upload: {asset_name} ({file_path.stat().st_size} bytes)")
            return None

        # Remove the template part from upload_url
        upload_url = release["upload_url"].split("{")[0]

        headers = self.headers.copy()
        headers["Content-Type"] = "application/octet-stream"
        params = {"name": asset_name}

        size = os.path.getsize(file_path)
        try:
            with open(file_path, "rb") as f:
                response = requests.post(upload_url, headers=headers, params=params, data=f)
        except requests.exceptions.RequestException as e:
            raise GitHubAPIError(f"Upload of {asset_name} failed: {e}") from e

        if response.status_code == 422:
            raise AssetConflict(
                f"Asset '{asset_name}' already exists on release '{release.get('tag_name')}' ({_describe(response)})",
                422,
            )
        if response.status_code == 404:
            raise ReleaseNotFound(f"Release '{release.get('tag_name')}' not found ({_describe(response)})", 404)
        if not response.ok:
            raise GitHubAPIError(f"Upload of {asset_name} failed: {_describe(response)}", response.status_code)

        print(f"  Uploaded: {asset_name} ({size} bytes)")
        return response.json()
