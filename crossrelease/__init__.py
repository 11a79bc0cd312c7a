"""Cross-compile a Go project for a fixed platform matrix and publish the binaries to a GitHub release."""

__version__ = "1.0.0"
