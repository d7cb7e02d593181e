"""Plain-text rendering of comparison results."""
from __future__ import annotations

from typing import Callable

from .models import AddressDefiData, DataSourceCompareResult, DiffType, PositionDiff
from .reconcile import available_chains, chain_position_counts, group_diffs

_STATUS_LABELS = {
    DiffType.ADDED: "Only in B",
    DiffType.REMOVED: "Only in A",
    DiffType.CHANGED: "Value changed",
    DiffType.UNCHANGED: "Unchanged",
}


def format_usd(value: float) -> str:
    if value < 0:
        return f"-${-value:,.2f}"
    return f"${value:,.2f}"


def format_diff_usd(value: float) -> str:
    return f"+{format_usd(value)}" if value >= 0 else format_usd(value)


def format_percent(value: float) -> str:
    return f"{'+' if value >= 0 else ''}{value:.2f}%"


def _format_address(address: str) -> str:
    if len(address) > 16:
        return f"{address[:10]}...{address[-6:]}"
    return address


def build_diff_line(diff: PositionDiff) -> str:
    """One row of the diff table: protocol · chain · type · status · delta."""
    line = (
        f"{diff.protocol} · {diff.chain} · {diff.type.value} · "
        f"{_STATUS_LABELS[diff.diff_type]}"
    )
    if diff.value_diff_usd is not None:
        line += f" · {format_diff_usd(diff.value_diff_usd)}"
        if diff.value_diff_percent is not None:
            line += f" ({format_percent(diff.value_diff_percent)})"
    return line


def _build_source_section(title: str, data: AddressDefiData) -> str:
    chains = ", ".join(data.chains) if data.chains else "-"
    return (
        f"{title}: {data.source or '-'}\n"
        f"  Total value: {format_usd(data.total_value_usd)}\n"
        f"  Positions: {len(data.positions)}\n"
        f"  Chains: {chains}\n"
        f"  Updated: {data.last_updated or '-'}"
    )


def build_summary_report(
    result: DataSourceCompareResult,
    chain_name: Callable[[str], str] = str,
    selected_chain: str | None = None,
) -> str:
    """Render a full comparison: sources, summary, chains and diff table.

    ``result`` is expected to be already scoped when ``selected_chain`` is set;
    the chain list is taken from ``result`` as given.
    """
    summary = result.summary
    scope = chain_name(selected_chain) if selected_chain else "All networks"

    lines = [
        f"📊 DeFi source comparison · {_format_address(result.address_a.address)}",
        f"Scope: {scope}",
        "",
        _build_source_section("Source A", result.address_a),
        "",
        _build_source_section("Source B", result.address_b),
        "",
        f"Value difference: {format_diff_usd(summary.total_value_diff_usd)} "
        f"({format_percent(summary.total_value_diff_percent)})",
        f"Only in A: {summary.positions_only_in_a} · "
        f"Only in B: {summary.positions_only_in_b} · "
        f"Common: {summary.common_positions} · "
        f"Changed: {summary.changed_positions}",
    ]

    counts = chain_position_counts(result)
    chains = available_chains(result)
    if chains:
        lines.append("")
        lines.append("Chains:")
        for chain in chains:
            lines.append(f"  {chain_name(chain)} ({chain}): {counts.get(chain, 0)}")

    added, removed, changed = group_diffs(result.position_diffs)
    listed = [*added, *removed, *changed]
    if listed:
        lines.append("")
        lines.append("Differences:")
        lines.extend(f"  {build_diff_line(d)}" for d in listed)
    else:
        lines.append("")
        lines.append("No differences found.")

    return "\n".join(lines)
