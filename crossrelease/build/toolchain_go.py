"""Go toolchain build configuration.

Cross-compilation is selected purely through ``GOOS``/``GOARCH``; no other
build flags are passed, so the binaries are built the same way ``go build``
would build them on the target platform.
"""

import os
import subprocess


def check_environment():
    """Check if the go command is available."""
    try:
        result = subprocess.run(["go", "version"], capture_output=True, text=True)
    except OSError:
        result = None
    if result is not None and result.returncode == 0:
        print(f"Go environment detected: {result.stdout.strip()}")
        return True
    print("Go toolchain not found. Please install Go and make sure it is in PATH.")
    return False


def get_download_command():
    """Fetch every module listed in go.mod into the module cache."""
    return ["go", "mod", "download"]


def get_build_command(output):
    return ["go", "build", "-o", output]


def get_env(cell):
    """Get environment variables for building ``cell``."""
    env = os.environ.copy()
    env["GOOS"] = cell.os
    env["GOARCH"] = cell.arch
    return env
