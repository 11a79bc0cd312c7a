import os

from crossrelease.cleanup import cleanup_all, cleanup_cell
from crossrelease.errors import CleanupWarning
from crossrelease.matrix import MatrixCell


def test_deletes_artifact(config, artifact_files):
    path = os.path.join(config.project_root, "walk_linux_amd64")
    open(path, "wb").close()

    assert cleanup_cell(config, MatrixCell("linux", "amd64")) is None
    assert artifact_files() == []


def test_second_cleanup_is_not_an_error(config):
    cell = MatrixCell("linux", "amd64")
    open(os.path.join(config.project_root, "walk_linux_amd64"), "wb").close()

    assert cleanup_cell(config, cell) is None
    assert cleanup_cell(config, cell) is None


def test_undeletable_file_is_a_warning(config, monkeypatch, capsys):
    def remove(path):
        raise PermissionError(13, "Permission denied", path)

    monkeypatch.setattr(os, "remove", remove)
    warning = cleanup_cell(config, MatrixCell("windows", "amd64"))

    assert isinstance(warning, CleanupWarning)
    assert "[windows/amd64]" in str(warning)
    assert "walk_windows_amd64.exe" in capsys.readouterr().err


def test_dry_run_keeps_files(config, artifact_files):
    config.dry_run = True
    open(os.path.join(config.project_root, "walk_linux_amd64"), "wb").close()

    assert cleanup_cell(config, MatrixCell("linux", "amd64")) is None
    assert artifact_files() == ["walk_linux_amd64"]


def test_cleanup_all_only_touches_given_cells(config, artifact_files):
    for name in ("walk_linux_amd64", "walk_linux_arm64", "walk_darwin_amd64"):
        open(os.path.join(config.project_root, name), "wb").close()

    warnings = cleanup_all(config, [MatrixCell("linux", "amd64"), MatrixCell("darwin", "amd64")])

    assert warnings == {}
    assert artifact_files() == ["walk_linux_arm64"]


def test_unexpected_error_becomes_a_warning(config, monkeypatch, capsys):
    def remove(path):
        raise RuntimeError("filesystem went away")

    monkeypatch.setattr(os, "remove", remove)
    cells = [MatrixCell("linux", "amd64"), MatrixCell("darwin", "arm64")]
    warnings = cleanup_all(config, cells)

    assert list(warnings) == cells
    assert all(isinstance(w, CleanupWarning) for w in warnings.values())
    assert "RuntimeError" in str(warnings[cells[0]])
    assert "filesystem went away" in capsys.readouterr().err
