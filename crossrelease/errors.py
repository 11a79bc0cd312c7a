class ReleaseError(Exception):
    """Base class for every failure of a release run."""


class ResolutionError(ReleaseError):
    """The release tag to publish to could not be determined."""


class CellError(ReleaseError):
    """A failure tied to one matrix cell; the message is prefixed with ``[os/arch]`` when there is one."""

    def __init__(self, cell, message):
        self.cell = cell
        self.reason = message
        if cell is None:
            super().__init__(message)
        else:
            super().__init__(f"[{cell}] {message}")


class BuildError(CellError):
    def __init__(self, cell, message, returncode=None):
        super().__init__(cell, message)
        self.returncode = returncode


class PublishError(CellError):
    pass


class PhaseError(ReleaseError):
    """One or more cells failed during a phase."""

    def __init__(self, phase, errors):
        self.phase = phase
        self.errors = list(errors)
        lines = [f"{phase} failed for {len(self.errors)} target(s):"]
        lines += [f"  {e}" for e in self.errors]
        super().__init__("\n".join(lines))


class CleanupWarning(UserWarning):
    pass
