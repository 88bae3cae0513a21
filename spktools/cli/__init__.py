"""CLI for spktools.

Usage:
    from spktools.cli import main

    exit_code = main(["fix", "data/selfplay", "-r"], codec=my_decoder)
"""

from spktools.cli.output import (
    CountSummary,
    MaintenanceSummary,
    Reporter,
)
from spktools.cli.runner import (
    build_parser,
    main,
    run,
)

__all__ = [
    # Output
    "CountSummary",
    "MaintenanceSummary",
    "Reporter",
    # Runner
    "build_parser",
    "main",
    "run",
]
