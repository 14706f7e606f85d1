"""
speedscope.py

Serializes a Profile into the speedscope file format as a single "sampled"
profile. Frames are shared between samples by index.

File format reference:
https://github.com/jlfwong/speedscope/blob/main/src/lib/file-format-spec.ts
"""

import json

from cpuprofile_flame.profile import Profile

SPEEDSCOPE_SCHEMA = "https://www.speedscope.app/file-format-schema.json"


def to_speedscope(profile: Profile, exporter: str = "cpuprofile-flame") -> dict:
    frame_index: dict[int, int] = {}
    frames = []
    for frame in profile.frames():
        frame_index[id(frame)] = len(frames)
        entry = {"name": frame.name}
        # GC and native frames come without a script url
        if frame.file:
            entry["file"] = frame.file
            entry["line"] = frame.line
            entry["col"] = frame.col
        frames.append(entry)

    samples = [[frame_index[id(frame)] for frame in stack] for stack in profile.samples]

    return {
        "$schema": SPEEDSCOPE_SCHEMA,
        "exporter": exporter,
        "name": profile.name,
        "activeProfileIndex": 0,
        "shared": {"frames": frames},
        "profiles": [
            {
                "type": "sampled",
                "name": profile.name,
                "unit": getattr(profile.value_formatter, "unit", "none"),
                "startValue": 0,
                "endValue": profile.get_total_weight(),
                "samples": samples,
                "weights": list(profile.weights),
            }
        ],
    }


def export_speedscope(profile: Profile, out, indent=None):
    json.dump(to_speedscope(profile), out, indent=indent)
    out.write("\n")
