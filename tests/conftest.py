import pytest


def _call_frame(name, url="app.js", line=0, col=0):
    return {"functionName": name, "scriptId": "1", "url": url, "lineNumber": line, "columnNumber": col}


@pytest.fixture
def literal_cpu_profile():
    """root(1) -> A(2) -> B(3); samples [3, 3, 2] with deltas [5, 5, 10]."""
    return {
        "startTime": 1000,
        "endTime": 1020,
        "nodes": [
            {"id": 1, "callFrame": _call_frame("(root)", url=""), "hitCount": 0, "children": [2]},
            {"id": 2, "callFrame": _call_frame("A", line=1), "hitCount": 1, "children": [3]},
            {"id": 3, "callFrame": _call_frame("B", line=2), "hitCount": 2},
        ],
        "samples": [3, 3, 2],
        "timeDeltas": [5, 5, 10],
    }


@pytest.fixture
def literal_timeline(literal_cpu_profile):
    return [
        {"pid": 1, "tid": 1, "ts": 0, "ph": "M", "cat": "__metadata", "name": "thread_name", "args": {"name": "main"}},
        {
            "pid": 1, "tid": 1, "ts": 10, "ph": "I", "cat": "disabled-by-default-devtools.timeline",
            "name": "CpuProfile", "args": {"data": {"cpuProfile": literal_cpu_profile}},
        },
    ]
