import concurrent.futures

from .errors import CellError


def run_phase(func, cells, max_workers, error_cls=CellError):
    """Run ``func(cell)`` for every cell on a thread pool and wait for all of them.

    A ``CellError`` only marks its own cell as failed; the other cells keep
    running. Nothing is cancelled. Any other exception raised for a cell is
    recorded for that cell as ``error_cls``.

    Returns:
        Tuple of (results, errors), both dicts keyed by cell in matrix order
    """
    results = {}
    errors = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(func, cell): cell for cell in cells}
        for future in concurrent.futures.as_completed(futures):
            cell = futures[future]
            try:
                results[cell] = future.result()
            except CellError as e:
                errors[cell] = e
            except Exception as e:
                error = error_cls(cell, f"Unexpected error: {type(e).__name__}: {e}")
                error.__cause__ = e
                errors[cell] = error

    order = {cell: i for i, cell in enumerate(cells)}
    results = dict(sorted(results.items(), key=lambda item: order[item[0]]))
    errors = dict(sorted(errors.items(), key=lambda item: order[item[0]]))
    return results, errors
