"""Build, publish and clean up one release across the whole target matrix.

The phases are separated by barriers: every cell finishes building before
any upload starts, and every upload finishes before any file is deleted.
Within a phase the cells run concurrently.

Per-cell states::

    pending -> built -> published -> cleaned
    pending -> build_failed          (the run stops before publishing)
    built   -> publish_failed        (the artifact is kept on disk)
"""

import enum
import sys
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .build.common import build_all
from .cleanup import cleanup_all
from .errors import BuildError, PhaseError, ReleaseError
from .upload.common import publish_all


class CellState(enum.Enum):
    PENDING = "pending"
    BUILT = "built"
    PUBLISHED = "published"
    CLEANED = "cleaned"
    BUILD_FAILED = "build_failed"
    PUBLISH_FAILED = "publish_failed"


@dataclass
class ReleaseReport:
    cells: List
    tag: Optional[str] = None
    states: Dict = field(default_factory=dict)
    errors: Dict = field(default_factory=dict)
    warnings: Dict = field(default_factory=dict)
    fatal: Optional[ReleaseError] = None

    def __post_init__(self):
        for cell in self.cells:
            self.states.setdefault(cell, CellState.PENDING)

    @property
    def ok(self):
        # an artifact that could not be deleted is only a warning
        if self.fatal is not None or self.errors:
            return False
        return all(
            state is CellState.CLEANED or (state is CellState.PUBLISHED and cell in self.warnings)
            for cell, state in self.states.items()
        )

    @property
    def exit_code(self):
        return 0 if self.ok else 1

    def print_summary(self, dry_run=False):
        print(f"\n{'='*60}")
        print("Summary:")
        if self.tag:
            print(f"  Release: {self.tag}")
        for cell in self.cells:
            line = f"  {str(cell):<16} {self.states[cell].value}"
            if cell in self.warnings:
                line += " (artifact not deleted)"
            print(line)
        if self.fatal is not None:
            print(f"\n  Run aborted: {self.fatal}")
        elif self.errors:
            print(f"\n  {len(self.errors)} target(s) failed to publish")
        if dry_run:
            print("\n  This was a DRY RUN - no files were actually uploaded or deleted")
        print(f"{'='*60}")


def run_release(config, cells, resolver, client, build=None, publish=None, cleanup=None):
    """Run every phase for ``cells`` and return a ``ReleaseReport``.

    ``resolver`` decides which release to publish to. ``build``, ``publish``
    and ``cleanup`` are the phase functions; the defaults run the go
    toolchain and talk to GitHub through ``client``.
    """
    build = build or build_all
    publish = publish or publish_all
    cleanup = cleanup or cleanup_all
    report = ReleaseReport(cells)

    print(f"Resolving release from {resolver.describe()}")
    try:
        report.tag = resolver.resolve()
    except ReleaseError as e:
        report.fatal = e
        return report
    print(f"Publishing to release: {report.tag}")

    print(f"\nBuilding {len(cells)} target(s): {', '.join(str(c) for c in cells)}")
    try:
        build(config, cells)
    except PhaseError as e:
        for error in e.errors:
            report.states[error.cell] = CellState.BUILD_FAILED
            report.errors[error.cell] = error
        for cell in cells:
            if report.states[cell] is CellState.PENDING:
                report.states[cell] = CellState.BUILT
        report.fatal = e
        return report
    except BuildError as e:
        report.fatal = e
        return report
    for cell in cells:
        report.states[cell] = CellState.BUILT

    print(f"\nPublishing {len(cells)} artifact(s)")
    published, errors = publish(client, report.tag, config, cells)
    for cell, error in errors.items():
        print(f"Error: {error}", file=sys.stderr)
        report.states[cell] = CellState.PUBLISH_FAILED
        report.errors[cell] = error
    for cell in published:
        report.states[cell] = CellState.PUBLISHED

    # only artifacts that made it to the release may be deleted
    to_clean = [cell for cell in cells if report.states[cell] is CellState.PUBLISHED]
    if to_clean:
        print(f"\nCleaning up {len(to_clean)} artifact(s)")
        report.warnings = cleanup(config, to_clean)
        for cell in to_clean:
            if cell not in report.warnings:
                report.states[cell] = CellState.CLEANED

    return report
