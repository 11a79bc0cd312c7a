import itertools
from dataclasses import dataclass

GOOS = ("linux", "darwin", "windows")
GOARCH = ("amd64", "arm64")

WINDOWS = "windows"


@dataclass(frozen=True, order=True)
class MatrixCell:
    os: str
    arch: str

    def __str__(self):
        return f"{self.os}/{self.arch}"

    @classmethod
    def parse(cls, value):
        """Parse an ``os/arch`` string, e.g. ``linux/arm64``."""
        os_name, sep, arch = value.strip().partition("/")
        if not sep or not os_name or not arch:
            raise ValueError(f"Invalid target '{value}', expected OS/ARCH")
        return cls(os_name, arch)


def get_binary_extension(os_name):
    if os_name == WINDOWS:
        return ".exe"
    else:
        return ""


def artifact_name(binary, cell):
    """Name of the binary built for ``cell``, e.g. ``walk_windows_amd64.exe``."""
    return f"{binary}_{cell.os}_{cell.arch}{get_binary_extension(cell.os)}"


def _check_values(kind, values):
    seen = []
    for value in values:
        # "_" separates the name parts, so it may not appear inside one
        if not value or "_" in value or "/" in value:
            raise ValueError(f"Invalid {kind} value: '{value}'")
        if value not in seen:
            seen.append(value)
    return seen


def get_matrix(goos=GOOS, goarch=GOARCH):
    """Return every (os, arch) combination, in os-major order."""
    goos = _check_values("GOOS", goos)
    goarch = _check_values("GOARCH", goarch)
    return [MatrixCell(os_name, arch) for os_name, arch in itertools.product(goos, goarch)]


def select_targets(cells, targets):
    """Restrict ``cells`` to the ``os/arch`` strings in ``targets``, keeping matrix order."""
    if not targets:
        return list(cells)
    wanted = [MatrixCell.parse(t) for t in targets]
    unknown = [str(c) for c in wanted if c not in cells]
    if unknown:
        raise ValueError(f"Target(s) not in the build matrix: {', '.join(unknown)}")
    return [c for c in cells if c in wanted]
