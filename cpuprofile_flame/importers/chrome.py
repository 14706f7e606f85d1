"""
chrome.py

Imports V8 / Chrome CPU profiles into a flat-sample ``Profile``.

Two input forms are accepted:

1) A standalone CPU profile (``.cpuprofile``): a call tree of nodes plus a
   flat stream of sampled node ids and time deltas between samples.
2) A timeline event stream whose last event carries the same payload under
   ``args.data.cpuProfile``.

The call tree only lists children, so parent ids are rebuilt first. The
sample stream is then coalesced into runs and each run is walked from its
node up to the root to produce a root-first stack.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from cpuprofile_flame.errors import MalformedTimelineError
from cpuprofile_flame.profile import FrameInfo, Profile, TimeFormatter

logger = logging.getLogger(__name__)

GC_FUNCTION_NAME = "(garbage collector)"
ROOT_FUNCTION_NAME = "(root)"
IDLE_FUNCTION_NAME = "(idle)"
ANONYMOUS_FUNCTION_NAME = "(anonymous)"

_SKIPPED_FUNCTION_NAMES = (ROOT_FUNCTION_NAME, IDLE_FUNCTION_NAME)


@dataclass(frozen=True)
class CallFrame:
    """Describes the function definition a tree node belongs to."""

    function_name: str
    url: str
    line_number: int
    column_number: int
    script_id: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "CallFrame":
        return cls(
            function_name=data.get("functionName", ""),
            url=data.get("url", ""),
            line_number=data.get("lineNumber", 0),
            column_number=data.get("columnNumber", 0),
            script_id=str(data.get("scriptId", "")),
        )


@dataclass
class ProfileNode:
    """Describes one position in the profiler's call tree."""

    id: int
    call_frame: CallFrame
    hit_count: int = 0
    children: list[int] = field(default_factory=list)
    position_ticks: list[dict] = field(default_factory=list)
    parent_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileNode":
        return cls(
            id=data["id"],
            call_frame=CallFrame.from_dict(data.get("callFrame", {})),
            hit_count=data.get("hitCount", 0),
            children=list(data.get("children") or []),
            position_ticks=list(data.get("positionTicks") or []),
        )


@dataclass
class CPUProfile:
    """Describes a tree-encoded CPU profile."""

    start_time: float
    end_time: float
    nodes: list[ProfileNode] = field(default_factory=list)
    samples: list[int] = field(default_factory=list)
    time_deltas: list[float] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "CPUProfile":
        return cls(
            start_time=data.get("startTime", 0),
            end_time=data.get("endTime", 0),
            nodes=[ProfileNode.from_dict(n) for n in data.get("nodes") or []],
            samples=list(data.get("samples") or []),
            time_deltas=list(data.get("timeDeltas") or []),
        )


class FrameRegistry:
    """
    Get-or-insert cache from call frames to canonical ``FrameInfo`` objects.

    Call frames with identical coordinates share one ``FrameInfo``. A registry
    lives for a single import.
    """

    def __init__(self):
        self._by_call_frame: dict[CallFrame, FrameInfo] = {}
        self._by_key: dict[str, FrameInfo] = {}

    def __len__(self):
        return len(self._by_key)

    def get_or_insert(
        self, call_frame: CallFrame, create: Callable[[CallFrame], FrameInfo]
    ) -> FrameInfo:
        frame = self._by_call_frame.get(call_frame)
        if frame is None:
            candidate = create(call_frame)
            frame = self._by_key.setdefault(candidate.key, candidate)
            self._by_call_frame[call_frame] = frame
        return frame

    def frame_for(self, call_frame: CallFrame) -> FrameInfo:
        return self.get_or_insert(call_frame, _ordinary_frame)

    def gc_frame_for(self, call_frame: CallFrame) -> FrameInfo:
        return self.get_or_insert(call_frame, _gc_frame)


def _ordinary_frame(call_frame: CallFrame) -> FrameInfo:
    name = call_frame.function_name or ANONYMOUS_FUNCTION_NAME
    file = call_frame.url
    line = call_frame.line_number
    col = call_frame.column_number
    return FrameInfo(key=f"{name}:{file}:{line}:{col}", name=name, file=file, line=line, col=col)


def _gc_frame(call_frame: CallFrame) -> FrameInfo:
    return FrameInfo(
        key=call_frame.function_name,
        name=call_frame.function_name,
        file=call_frame.url,
        line=call_frame.line_number,
        col=call_frame.column_number,
    )


def build_node_index(nodes: list[ProfileNode]) -> dict[int, ProfileNode]:
    """Index nodes by id and fill in each node's ``parent_id``."""
    node_by_id = {node.id: node for node in nodes}
    for node in nodes:
        for child_id in node.children:
            child = node_by_id.get(child_id)
            if child is None:
                logger.debug("Node %s lists unknown child %s", node.id, child_id)
                continue
            child.parent_id = node.id
    return node_by_id


def coalesce_samples(samples: list[int], time_deltas: list[float]):
    """
    Collapse runs of identical consecutive samples.

    Each run's id is pushed when the run starts, paired with the time
    accumulated by the *previous* run, so the weight of run ``i`` is found in
    ``time_deltas[i + 1]`` of the result. A trailing entry repeating the last
    id carries the weight of the final run.
    """
    coalesced_samples: list[int] = []
    coalesced_deltas: list[float] = []

    elapsed = 0
    last_node_id = None
    for i, node_id in enumerate(samples):
        if node_id != last_node_id:
            coalesced_samples.append(node_id)
            coalesced_deltas.append(elapsed)
            elapsed = 0

        elapsed += time_deltas[i] if i < len(time_deltas) else 0
        last_node_id = node_id

    if samples:
        coalesced_samples.append(last_node_id)
        coalesced_deltas.append(elapsed)

    return coalesced_samples, coalesced_deltas


class _StackWalker:
    """Turns sampled node ids into root-first stacks, splicing GC samples."""

    def __init__(self, node_by_id: dict[int, ProfileNode], registry: FrameRegistry):
        self.node_by_id = node_by_id
        self.registry = registry
        self.last_non_gc_leaf: Optional[ProfileNode] = None

    def stack_for(self, node_id: int) -> Optional[list[FrameInfo]]:
        """Returns the stack for one sample, or None if the node is unknown."""
        node = self.node_by_id.get(node_id)
        if node is None:
            logger.debug("Sample references unknown node %s", node_id)
            return None

        gc_frame = None
        if node.call_frame.function_name == GC_FUNCTION_NAME:
            # GC runs on top of whatever JS was executing before it
            gc_frame = self.registry.gc_frame_for(node.call_frame)
            if self.last_non_gc_leaf is None:
                return [gc_frame]
            node = self.last_non_gc_leaf

        self.last_non_gc_leaf = node

        stack = self._walk_to_root(node)
        stack.reverse()
        if gc_frame is not None:
            stack.append(gc_frame)
        return stack

    def _walk_to_root(self, node: ProfileNode) -> list[FrameInfo]:
        frames = []
        visited = set()
        while node is not None:
            if node.id in visited:
                logger.debug("Cycle in call tree at node %s", node.id)
                break
            visited.add(node.id)

            if node.call_frame.function_name not in _SKIPPED_FUNCTION_NAMES:
                frames.append(self.registry.frame_for(node.call_frame))

            if node.parent_id is None:
                break
            node = self.node_by_id.get(node.parent_id)
        return frames


def import_from_chrome_cpu_profile(cpu_profile) -> Profile:
    """
    Build a ``Profile`` from a CPU profile.

    ``cpu_profile`` is either a ``CPUProfile`` or the raw JSON dict.
    """
    if isinstance(cpu_profile, dict):
        cpu_profile = CPUProfile.from_dict(cpu_profile)

    profile = Profile(cpu_profile.end_time - cpu_profile.start_time)

    node_by_id = build_node_index(cpu_profile.nodes)
    samples, time_deltas = coalesce_samples(cpu_profile.samples, cpu_profile.time_deltas)

    walker = _StackWalker(node_by_id, FrameRegistry())
    for i, node_id in enumerate(samples):
        weight = time_deltas[i + 1] if i + 1 < len(time_deltas) else 0
        stack = walker.stack_for(node_id)
        if stack is None:
            continue
        profile.append_sample(stack, weight)

    profile.set_value_formatter(TimeFormatter("microseconds"))
    logger.info(
        "Imported %d samples (%d raw) over %d nodes, %d unique frames",
        profile.sample_count,
        len(cpu_profile.samples),
        len(node_by_id),
        len(walker.registry),
    )
    return profile


def import_from_chrome_timeline(events: list[dict]) -> Profile:
    """Import the CPU profile carried by the last event of a timeline."""
    try:
        cpu_profile = events[-1]["args"]["data"]["cpuProfile"]
    except (IndexError, KeyError, TypeError) as exc:
        raise MalformedTimelineError(
            "Last timeline event has no args.data.cpuProfile payload"
        ) from exc
    if not isinstance(cpu_profile, dict):
        raise MalformedTimelineError("args.data.cpuProfile is not an object")
    return import_from_chrome_cpu_profile(cpu_profile)
