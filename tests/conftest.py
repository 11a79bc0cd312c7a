"""Shared fixtures: a small config rooted in tmp_path, a fake go toolchain and a fake GitHub client."""
import json
import os
import threading
from pathlib import Path

import pytest

from crossrelease.config import ReleaseConfig
from crossrelease.upload import github
from crossrelease.upload.github import AssetConflict, ReleaseNotFound


@pytest.fixture
def config(tmp_path: Path) -> ReleaseConfig:
    (tmp_path / "go.mod").write_text("module example.com/walk\n")
    return ReleaseConfig(
        binary="walk",
        repo="antonmedv/walk",
        goos=("linux", "darwin"),
        goarch=("amd64", "arm64"),
        project_root=str(tmp_path),
    )


class FakeRunner:
    """Stands in for ``run_command``: writes the -o output unless the target is told to fail."""

    def __init__(self, fail=(), download_status=0):
        self.fail = set(fail)
        self.download_status = download_status
        self.calls = []
        self.lock = threading.Lock()

    def __call__(self, cmd, cwd, env):
        with self.lock:
            self.calls.append((list(cmd), cwd, env))
        if cmd[:3] == ["go", "mod", "download"]:
            return self.download_status, "" if self.download_status == 0 else "go: network unreachable\n"

        target = f"{env['GOOS']}/{env['GOARCH']}"
        if target in self.fail:
            return 2, f"cmd/compile: unsupported GOOS/GOARCH pair {target}\n"
        output = cmd[cmd.index("-o") + 1]
        Path(cwd, output).write_bytes(b"\x7fELF fake binary")
        return 0, ""

    @property
    def build_calls(self):
        return [c for c in self.calls if c[0][:2] == ["go", "build"]]

    @property
    def download_calls(self):
        return [c for c in self.calls if c[0][:3] == ["go", "mod", "download"]]


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


class FakeClient:
    """In-memory release host with the same methods as GitHubClient."""

    def __init__(self, releases=("v1.2.3",), latest="v1.2.3", dry_run=False):
        self.repo = "antonmedv/walk"
        self.dry_run = dry_run
        self.latest = latest
        self.assets = {tag: {} for tag in releases}
        self.fail_assets = {}
        self.uploaded = []
        self.lock = threading.Lock()

    def get_latest_release(self):
        return {"tag_name": self.latest}

    def get_release_by_tag(self, tag):
        if tag not in self.assets:
            raise ReleaseNotFound(f"Release with tag '{tag}' not found in {self.repo}", 404)
        return {"id": 1, "tag_name": tag, "name": tag, "upload_url": "https://uploads.example/assets{?name,label}"}

    def upload_asset(self, release, file_path, asset_name):
        # reading the file proves it still exists at upload time
        data = Path(file_path).read_bytes()
        if asset_name in self.fail_assets:
            raise self.fail_assets[asset_name]
        with self.lock:
            existing = self.assets[release["tag_name"]]
            if asset_name in existing:
                raise AssetConflict(f"Asset '{asset_name}' already exists on release '{release['tag_name']}'", 422)
            existing[asset_name] = data
            self.uploaded.append(asset_name)


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def artifact_files(config):
    """Names of the binaries currently present in the project root."""
    return lambda: sorted(f for f in os.listdir(config.project_root) if f.startswith(config.binary + "_"))


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)
        self.reason = "Reason"

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def fake_get(monkeypatch):
    """Replace requests.get with one returning (or raising) a fixed response; returns the call log."""
    calls = []

    def install(response):
        def get(url, **kwargs):
            calls.append((url, kwargs))
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(github.requests, "get", get)
        return calls

    return install


@pytest.fixture
def make_runner():
    return FakeRunner
