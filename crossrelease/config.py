import json
import os
from configparser import ConfigParser
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .matrix import GOARCH, GOOS, get_matrix, select_targets

CONFIG_FILENAME = "crossrelease.ini"
DEFAULT_API_BASE = "https://api.github.com"

section_project = "project"
section_matrix = "matrix"
section_build = "build"
section_github = "github"

default_values = {
    section_project: {
        "binary": "walk",
        "repo": "antonmedv/walk",
    },
    section_matrix: {
        "goos": ", ".join(GOOS),
        "goarch": ", ".join(GOARCH),
    },
    section_build: {
        "workers": "0",
    },
    section_github: {
        "api_base": DEFAULT_API_BASE,
    },
}


@dataclass
class ReleaseConfig:
    binary: str = "walk"
    repo: str = "antonmedv/walk"
    goos: Tuple[str, ...] = GOOS
    goarch: Tuple[str, ...] = GOARCH
    project_root: str = field(default_factory=os.getcwd)
    workers: int = 0
    api_base: str = DEFAULT_API_BASE
    dry_run: bool = False

    def matrix(self):
        return get_matrix(self.goos, self.goarch)

    def artifact_path(self, name):
        return os.path.join(self.project_root, name)

    def max_workers(self, cells):
        """Worker count for a phase; 0 means one worker per cell."""
        if self.workers > 0:
            return self.workers
        return max(len(cells), 1)


def _split_list(value):
    return tuple(v.strip() for v in value.split(",") if v.strip())


def load_config(project_root: Optional[str] = None, config_path: Optional[str] = None) -> ReleaseConfig:
    """Read the built-in defaults, then ``crossrelease.ini`` (or ``config_path``) on top of them."""
    project_root = os.path.abspath(project_root or os.getcwd())
    if config_path is None:
        config_path = os.path.join(project_root, CONFIG_FILENAME)
    elif not os.path.exists(config_path):
        raise FileNotFoundError(f"Config file not found: {config_path}")

    config_parser = ConfigParser()
    config_parser.read_dict(default_values)
    config_parser.read(config_path)

    try:
        workers = config_parser.getint(section_build, "workers")
    except ValueError as e:
        raise ValueError(f"Invalid value for [build] workers: {e}") from e

    return ReleaseConfig(
        binary=config_parser.get(section_project, "binary"),
        repo=config_parser.get(section_project, "repo"),
        goos=_split_list(config_parser.get(section_matrix, "goos")),
        goarch=_split_list(config_parser.get(section_matrix, "goarch")),
        project_root=project_root,
        workers=workers,
        api_base=config_parser.get(section_github, "api_base").rstrip("/"),
    )


def add_config_arguments(parser):
    """Options shared by every command-line tool."""
    parser.add_argument("--config", help=f"Path to a config file (default: ./{CONFIG_FILENAME} if present)")
    parser.add_argument("--project-root", help="Directory containing go.mod (default: current directory)")
    parser.add_argument("--repo", help="GitHub repository in format owner/repo")
    parser.add_argument("--binary", help="Base name of the produced binaries")
    parser.add_argument("--workers", type=int, help="Parallel jobs per phase (default: one per target)")
    parser.add_argument(
        "--target",
        action="append",
        default=[],
        metavar="OS/ARCH",
        help="Only handle this target, e.g. linux/arm64 (can be repeated)",
    )


def config_from_args(args):
    """Build the config from the file layer plus command-line overrides.

    Returns:
        Tuple of (config, cells)
    """
    config = load_config(args.project_root, args.config)
    if args.repo:
        config.repo = args.repo
    if args.binary:
        config.binary = args.binary
    if args.workers is not None:
        config.workers = args.workers
    config.dry_run = getattr(args, "dry_run", False)
    cells = select_targets(config.matrix(), args.target)
    return config, cells


def load_github_token(cwd: Optional[str] = None) -> Optional[str]:
    """Load GitHub token from .creds.json in ``cwd`` (default: current directory) or environment variable."""
    creds_file = os.path.join(cwd or os.getcwd(), ".creds.json")

    # Try to load from .creds.json first
    if os.path.exists(creds_file):
        try:
            with open(creds_file, "r") as f:
                creds = json.load(f)
                token = creds.get("github_token")
                if token:
                    return token
        except (OSError, ValueError) as e:
            print(f"Warning: Could not read .creds.json: {e}")

    # Fall back to environment variable
    return os.environ.get("GITHUB_TOKEN")
