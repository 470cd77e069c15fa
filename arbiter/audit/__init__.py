"""Decision trace and checksum module."""

from arbiter.audit.trace import TracingAsker, run_checksum, stable_dumps

__all__ = ["TracingAsker", "run_checksum", "stable_dumps"]
