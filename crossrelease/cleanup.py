import os
import sys

from .errors import CleanupWarning
from .matrix import artifact_name
from .phase import run_phase


def cleanup_cell(config, cell):
    """Delete the artifact of ``cell``.

    A file that is already absent counts as cleaned. Any other failure is
    not raised; it is printed and returned as a ``CleanupWarning``.

    Returns:
        None when the artifact is gone, otherwise the CleanupWarning
    """
    name = artifact_name(config.binary, cell)
    path = config.artifact_path(name)

    if config.dry_run:
        print(f"[{cell}] [DRY-RUN] Would delete: {name}")
        return None

    try:
        os.remove(path)
    except FileNotFoundError:
        print(f"[{cell}] {name} already removed")
        return None
    except OSError as e:
        warning = CleanupWarning(f"[{cell}] Could not delete {name}: {e}")
        print(f"Warning: {warning}", file=sys.stderr)
        return warning

    print(f"[{cell}] Deleted {name}")
    return None


def cleanup_all(config, cells):
    """Delete the artifacts of ``cells`` concurrently.

    Returns:
        Dict of cell -> CleanupWarning for the cells that could not be cleaned
    """
    results, errors = run_phase(lambda cell: cleanup_cell(config, cell), cells, config.max_workers(cells))
    warnings = {cell: warning for cell, warning in results.items() if warning is not None}
    for cell, error in errors.items():
        warnings[cell] = CleanupWarning(str(error))
        print(f"Warning: {error}", file=sys.stderr)
    return warnings
