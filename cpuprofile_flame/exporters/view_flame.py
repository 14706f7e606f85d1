#!/usr/bin/env python3
"""
view_flame.py

Read FlameGraph-style folded stacks and render an aggregated,
collapsible tree in your terminal using Rich, with human-friendly
time units.
"""

import sys
from rich import print
from rich.markup import escape
from rich.tree import Tree


def format_time(us) -> str:
    """Convert microseconds to a human-friendly string."""
    if us >= 1_000_000:
        return f"{us / 1_000_000:.2f}s"
    elif us >= 1_000:
        return f"{us / 1_000:.2f}ms"
    else:
        return f"{us:g}µs"


def build_tree(folded_lines):
    # Nested dict: frame -> { '_time': total, 'children': {} }
    root = {'_time': 0, 'children': {}}
    for line in folded_lines:
        line = line.strip()
        if not line or ' ' not in line:
            continue
        stack_part, weight_part = line.rsplit(' ', 1)
        try:
            dur = float(weight_part)
        except ValueError:
            continue
        frames = stack_part.split(';')
        node = root
        node['_time'] += dur
        for frame in frames:
            children = node['children']
            if frame not in children:
                children[frame] = {'_time': 0, 'children': {}}
            node = children[frame]
            node['_time'] += dur
    return root


def render(node, tree: Tree, total_time, format_value=format_time):
    # Sort children by descending time
    for name, child in sorted(node['children'].items(),
                              key=lambda kv: kv[1]['_time'], reverse=True):
        dur = child['_time']
        pct = dur / total_time * 100 if total_time else 0.0
        human = format_value(dur)
        branch = tree.add(f"[bold]{escape(name)}[/] • {human} ({pct:.1f}%)")
        render(child, branch, total_time, format_value)


def render_folded(folded_lines, format_value=format_time, title="root") -> Tree:
    root = build_tree(folded_lines)
    total = root['_time']
    console_tree = Tree(f"[b]{escape(title)}[/] • {format_value(total)} (100%)")
    render(root, console_tree, total, format_value)
    return console_tree


def main():
    print(render_folded(sys.stdin.readlines()))


if __name__ == "__main__":
    main()
