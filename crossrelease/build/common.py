import os
import subprocess

from ..errors import BuildError, PhaseError
from ..matrix import artifact_name
from ..phase import run_phase
from . import toolchain_go

OUTPUT_TAIL_LINES = 20


def run_command(cmd, cwd, env=None):
    """Run ``cmd`` and return (returncode, combined stdout/stderr).

    Raises OSError when the command cannot be started.
    """
    result = subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    )
    return result.returncode, result.stdout or ""


def _tail(output):
    lines = output.rstrip().splitlines()
    return "\n".join(lines[-OUTPUT_TAIL_LINES:])


def prepare_build(config, toolchain=toolchain_go):
    """Check prerequisites before any build command runs."""
    go_mod = os.path.join(config.project_root, "go.mod")
    if not os.path.exists(go_mod):
        raise BuildError(None, f"go.mod not found in {config.project_root}")

    if not toolchain.check_environment():
        raise BuildError(None, "Build toolchain is not available")


def download_dependencies(config, toolchain=toolchain_go, runner=None):
    """Materialize the module dependencies once, before any target is built."""
    runner = runner or run_command
    cmd = toolchain.get_download_command()
    print(f"Running: {' '.join(cmd)}")
    try:
        returncode, output = runner(cmd, config.project_root, None)
    except OSError as e:
        raise BuildError(None, f"Could not start '{' '.join(cmd)}': {e}") from e
    if returncode != 0:
        if output:
            print(_tail(output))
        raise BuildError(None, f"'{' '.join(cmd)}' exited with status {returncode}", returncode)


def build_cell(config, cell, toolchain=toolchain_go, runner=None):
    """Build the binary for one target and return its path."""
    runner = runner or run_command
    name = artifact_name(config.binary, cell)
    path = config.artifact_path(name)
    cmd = toolchain.get_build_command(name)
    print(f"[{cell}] Running: GOOS={cell.os} GOARCH={cell.arch} {' '.join(cmd)}")

    try:
        returncode, output = runner(cmd, config.project_root, toolchain.get_env(cell))
    except OSError as e:
        raise BuildError(cell, f"Could not start '{cmd[0]}': {e}") from e

    if returncode != 0:
        message = f"Build failed with exit status {returncode}"
        if output:
            message += "\n" + _tail(output)
        raise BuildError(cell, message, returncode)
    if not os.path.exists(path):
        raise BuildError(cell, f"Build succeeded but {name} was not created")

    print(f"[{cell}] Built {name}")
    return path


def build_all(config, cells, toolchain=toolchain_go, runner=None):
    """Download dependencies, then build every cell concurrently.

    All builds are waited for even when one fails. Artifacts of the cells
    that did build are left on disk.

    Returns:
        Dict of cell -> artifact path

    Raises:
        BuildError: if the dependency download fails
        PhaseError: if any cell failed to build
    """
    download_dependencies(config, toolchain, runner)

    results, errors = run_phase(
        lambda cell: build_cell(config, cell, toolchain, runner),
        cells,
        config.max_workers(cells),
        error_cls=BuildError,
    )
    if errors:
        raise PhaseError("Build", errors.values())
    return results
