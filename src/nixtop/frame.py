"""Text frame layout for the dashboard."""

from collections.abc import Mapping

from nixtop.models import ProcessGroup
from nixtop.monitor import ProcessTable, ps_table

DIVIDER = " * * * "


def summary_line(groups: Mapping[str, ProcessGroup]) -> str:
    """Headline with the total number of build processes."""
    total = sum(group.count for group in groups.values())
    return f"Nix build summary ({total} processes)"


def build_frame(
    groups: Mapping[str, ProcessGroup],
    process_table: ProcessTable = ps_table,
) -> list[str]:
    """
    Lay out one screen for the sampled groups.

    The summary comes first with one line per account, then a divider, then
    each account's header followed by its detailed process listing.
    """
    lines = [summary_line(groups)]
    for group in groups.values():
        lines.append(f"    {group.count:4} → {group.output_path}")
    lines.extend(["", DIVIDER, ""])

    for account, group in groups.items():
        lines.append(f":: ({account}) → {group.output_path}")
        lines.extend(process_table(account))
    return lines
