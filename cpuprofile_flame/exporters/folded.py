"""
folded.py

Emits FlameGraph-style folded stacks from a Profile:

    root;child;subchild <weight>

The output loads into Speedscope ("Import" -> "Text (FlameGraph)") or
Brendan Gregg's flamegraph.pl.
"""

from typing import Iterator

from cpuprofile_flame.profile import Profile


def _format_weight(weight) -> str:
    if float(weight).is_integer():
        return str(int(weight))
    return f"{weight:.3f}"


def display_names(profile: Profile) -> dict[int, str]:
    """
    Map each frame (by id) to the name used in folded stacks.

    Distinct frames sharing a name get their file:line:col appended, or an
    [idx] suffix when they have no file.
    """
    frames = profile.frames()
    raw_counts: dict[str, int] = {}
    for frame in frames:
        raw_counts[frame.name] = raw_counts.get(frame.name, 0) + 1

    seen_counts: dict[str, int] = {}
    names = {}
    for frame in frames:
        idx = seen_counts.get(frame.name, 0) + 1
        seen_counts[frame.name] = idx
        if raw_counts[frame.name] == 1:
            names[id(frame)] = frame.name
        elif frame.file:
            names[id(frame)] = f"{frame.name} {frame.file}:{frame.line}:{frame.col}"
        else:
            names[id(frame)] = f"{frame.name} [{idx}]"
    return names


def to_folded_lines(profile: Profile, min_weight=0) -> Iterator[str]:
    """
    For each sample, yields:
      root;child;...;leaf <weight>
    Empty stacks and samples lighter than min_weight are omitted.
    """
    names = display_names(profile)
    for stack, weight in profile.iter_samples():
        if not stack or weight < min_weight:
            continue
        yield f"{';'.join(names[id(frame)] for frame in stack)} {_format_weight(weight)}"


def export_folded(profile: Profile, out, min_weight=0):
    for line in to_folded_lines(profile, min_weight=min_weight):
        out.write(line + "\n")
