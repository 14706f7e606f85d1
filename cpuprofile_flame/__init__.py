"""
Convert V8 / Chrome CPU profiles into flat, weighted call stacks.
"""

from cpuprofile_flame.errors import CpuProfileError, MalformedTimelineError, UnrecognizedInputError
from cpuprofile_flame.importers.chrome import import_from_chrome_cpu_profile, import_from_chrome_timeline
from cpuprofile_flame.profile import FrameInfo, Profile, TimeFormatter

__version__ = "0.1.0"

__all__ = [
    "CpuProfileError",
    "FrameInfo",
    "MalformedTimelineError",
    "Profile",
    "TimeFormatter",
    "UnrecognizedInputError",
    "import_from_chrome_cpu_profile",
    "import_from_chrome_timeline",
]
