#!/usr/bin/env python3
"""
cli.py

Command-line interface for converting V8 / Chrome CPU profiles into flame
graphs: an aggregated tree in the terminal, folded stacks, or a speedscope
JSON document.
"""
import json
import logging
import sys

import click
from rich import print
from rich.console import Console
from rich.logging import RichHandler

from cpuprofile_flame.errors import CpuProfileError
from cpuprofile_flame.exporters import folded
from cpuprofile_flame.exporters import speedscope
from cpuprofile_flame.exporters import view_flame
from cpuprofile_flame.loader import load_profile

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format", "-f", "output_format",
    type=click.Choice(["tree", "folded", "speedscope"]),
    default="tree", show_default=True, envvar="CPUPROFILE_FLAME_FORMAT",
    help="Output format",
)
@click.option(
    "--min-us", type=float, default=0, show_default=True,
    envvar="CPUPROFILE_FLAME_MIN_US",
    help="Omit samples lighter than this (µs) from tree and folded output",
)
@click.option(
    "--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING", show_default=True, envvar="CPUPROFILE_FLAME_LOG_LEVEL",
    help="Logging verbosity (written to stderr)",
)
def main(path, output_format, min_us, log_level):
    """
    Convert the CPU profile at PATH (a .cpuprofile file or a timeline
    event trace) into a flame graph.
    """
    _configure_logging(log_level.upper())

    try:
        profile = load_profile(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        click.echo(f"Invalid JSON in {path}: {e}", err=True)
        raise SystemExit(1)
    except CpuProfileError as e:
        click.echo(f"Failed to import {path}: {e}", err=True)
        raise SystemExit(1)

    if not profile.sample_count:
        click.echo("No samples found in the profile.", err=True)
        raise SystemExit(1)

    if output_format == "speedscope":
        speedscope.export_speedscope(profile, sys.stdout)
        return

    folded_lines = list(folded.to_folded_lines(profile, min_weight=min_us))
    if output_format == "folded":
        for line in folded_lines:
            click.echo(line)
        return

    # Render as a flame graph in the terminal
    tree = view_flame.render_folded(
        folded_lines, format_value=profile.format_value, title=profile.name or "root"
    )
    print(tree)


if __name__ == "__main__":
    main()
