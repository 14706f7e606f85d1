"""
Exceptions raised by cpuprofile_flame.
"""


class CpuProfileError(Exception):
    """Base class for errors raised while loading or importing a profile."""


class MalformedTimelineError(CpuProfileError, ValueError):
    """The last timeline event does not carry an ``args.data.cpuProfile`` payload."""


class UnrecognizedInputError(CpuProfileError, ValueError):
    """A JSON document is neither a CPU profile nor a timeline event stream."""
