from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table


def _kib(value: Optional[int]) -> str:
    if value is None:
        return "N/A"
    return f"{value / 1024:,.1f}"


def _mib(value: Optional[int]) -> str:
    if value is None:
        return "N/A"
    return f"{value / (1024 * 1024):.2f}"


def _cpu(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"{value:.1f}"


def print_results(results: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """
    Render per-format upload and query timings, with the query's peak RSS
    and CPU usage, as a rich table.

    Rows keep upload order; the fastest query is highlighted.
    """
    console = console or Console(stderr=True)

    if not results:
        console.print("[yellow]No results to display.[/yellow]")
        return

    table = Table(
        title="S3 Select Results",
        box=box.ROUNDED,
        caption="Sizes in KiB, memory in MiB, times in ms",
    )
    table.add_column("Format", style="cyan", no_wrap=True)
    table.add_column("Object", justify="right", style="magenta")
    table.add_column("Upload (ms)", justify="right", style="blue")
    table.add_column("Query (ms)", justify="right", style="green")
    table.add_column("Scanned", justify="right", style="yellow")
    table.add_column("Returned", justify="right", style="yellow")
    table.add_column("Peak RSS (MiB)", justify="right", style="red")
    table.add_column("CPU %", justify="right", style="red")

    fastest = min(res.get("duration_ms", 0) for res in results)

    for res in results:
        stats = res.get("stats") or {}
        duration = res.get("duration_ms", 0)
        duration_str = f"{duration:,}"
        if duration == fastest and len(results) > 1:
            duration_str = f"[bold]{duration_str}[/bold]"
        table.add_row(
            res.get("format", "Unknown"),
            _kib(res.get("object_bytes")),
            f"{res.get('upload_ms', 0):,}",
            duration_str,
            _kib(stats.get("bytes_scanned")),
            _kib(stats.get("bytes_returned")),
            _mib(res.get("peak_rss_bytes")),
            _cpu(res.get("cpu_percent")),
        )

    console.print(table)


__all__ = ["print_results"]
