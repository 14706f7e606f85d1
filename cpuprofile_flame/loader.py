"""
Load a CPU profile or timeline JSON file and import it.
"""

import json
import logging
import os

from cpuprofile_flame.errors import UnrecognizedInputError
from cpuprofile_flame.importers.chrome import import_from_chrome_cpu_profile, import_from_chrome_timeline
from cpuprofile_flame.profile import Profile

logger = logging.getLogger(__name__)


def import_from_json(data) -> Profile:
    """Dispatch an already-decoded JSON document to the matching importer."""
    if isinstance(data, list):
        logger.debug("Detected timeline event list with %d events", len(data))
        return import_from_chrome_timeline(data)
    if isinstance(data, dict):
        if "traceEvents" in data:
            logger.debug("Detected trace object with traceEvents")
            return import_from_chrome_timeline(data["traceEvents"])
        if "nodes" in data:
            logger.debug("Detected standalone CPU profile")
            return import_from_chrome_cpu_profile(data)
    raise UnrecognizedInputError(
        "Expected a CPU profile object or a list of timeline events"
    )


def load_profile(path: str) -> Profile:
    with open(os.path.expanduser(path), "r", encoding="utf-8") as f:
        data = json.load(f)
    profile = import_from_json(data)
    profile.set_name(os.path.basename(path))
    return profile
