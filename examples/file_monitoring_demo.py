#!/usr/bin/env python3
"""
Demonstration script for the polling alteration monitor.

This script watches a directory tree with a FileAlterationObserver driven by
a FileAlterationMonitor and prints every change the scans detect.

Usage:
    python examples/file_monitoring_demo.py [--watch-dir PATH] [--duration SECONDS] [--interval SECONDS]
"""

import logging
import logging.config
import time
from pathlib import Path

import click
from alteration_monitor import (
    CaseSensitivity,
    FileAlterationListenerAdaptor,
    FileAlterationMonitor,
    FileAlterationObserver,
    MonitorConfig,
)
from alteration_monitor.config import set_config
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn, track
from rich.table import Table

logger = logging.getLogger(__name__)

# Initialize rich console
console = Console()


class ConsoleListener(FileAlterationListenerAdaptor):
    """Listener printing each change and keeping per-type counts."""

    def __init__(self):
        self.operations_count = {"created": 0, "modified": 0, "deleted": 0}
        self.scans = 0

    def on_stop(self, observer) -> None:
        self.scans += 1

    def _report(self, operation: str, kind: str, path: Path) -> None:
        self.operations_count[operation] += 1
        console.print(f"[cyan]{operation}[/cyan] {kind}: [italic]{path}[/italic]")

    def on_directory_create(self, directory: Path) -> None:
        self._report("created", "directory", directory)

    def on_directory_change(self, directory: Path) -> None:
        self._report("modified", "directory", directory)

    def on_directory_delete(self, directory: Path) -> None:
        self._report("deleted", "directory", directory)

    def on_file_create(self, file: Path) -> None:
        self._report("created", "file", file)

    def on_file_change(self, file: Path) -> None:
        self._report("modified", "file", file)

    def on_file_delete(self, file: Path) -> None:
        self._report("deleted", "file", file)


def create_monitoring_stats_table(stats: dict, listener: ConsoleListener) -> Table:
    """Create a rich table for monitoring statistics."""
    table = Table(title="Monitoring Statistics", show_header=True)
    table.add_column("Metric", style="cyan", width=20)
    table.add_column("Value", style="white", width=15)
    table.add_column("Details", style="dim", width=30)

    table.add_row("Scan loops", str(stats["scan_count"]), "Completed monitor iterations")
    table.add_row("Interval", f"{stats['interval_seconds']}s", "Delay between scans")
    table.add_row("Created", str(listener.operations_count["created"]), "New files and directories")
    table.add_row("Modified", str(listener.operations_count["modified"]), "Changed files and directories")
    table.add_row("Deleted", str(listener.operations_count["deleted"]), "Removed files and directories")

    return table


def demonstrate_monitoring(watch_directory: Path, duration: int, interval: float, ignore: tuple[str, ...]) -> None:
    """
    Watch a directory for a fixed time and report what changed.

    Args:
        watch_directory: Directory to monitor for changes
        duration: How long to run the demo (in seconds)
        interval: Seconds between scans
        ignore: Name patterns to leave untracked
    """
    config = MonitorConfig(monitor_interval_seconds=interval, ignored_patterns=list(ignore))
    set_config(config)

    console.print(
        Panel.fit(
            "[bold blue]Polling File Alteration Monitor Demo[/bold blue]\n"
            f"Watching: [cyan]{watch_directory}[/cyan] | "
            f"Duration: [yellow]{duration}s[/yellow] | Interval: [yellow]{interval}s[/yellow]",
            title="Alteration Monitor",
            border_style="blue",
        )
    )

    listener = ConsoleListener()
    observer = FileAlterationObserver(
        watch_directory,
        file_filter=config.build_file_filter(),
        case_sensitivity=CaseSensitivity.SYSTEM,
    )
    observer.add_listener(listener)
    monitor = FileAlterationMonitor(observers=[observer])

    monitor.start()
    console.print("[bold green]Monitoring started[/bold green] - create, edit or delete files to see events")

    try:
        start_time = time.time()
        elapsed_time = 0.0
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            monitoring_task = progress.add_task("Monitoring active", total=duration)
            while elapsed_time < duration:
                time.sleep(0.5)
                elapsed_time = time.time() - start_time
                progress.update(monitoring_task, completed=min(elapsed_time, duration))
    finally:
        console.print("\n[yellow]Stopping monitoring...[/yellow]")
        monitor.stop()

    console.print(create_monitoring_stats_table(monitor.get_monitoring_stats(), listener))


def create_sample_files(directory: Path) -> None:
    """Create a few sample files to watch."""
    sample_files = {
        "README.md": "# Sample Project\n",
        "docs/getting-started.md": "# Getting Started\n",
        "docs/notes.tmp": "scratch\n",
    }

    for file_path, content in track(sample_files.items(), description="Creating files..."):
        full_path = directory / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding='utf-8')

    console.print(f"[bold green]Created {len(sample_files)} sample files in {directory}[/bold green]")


@click.command()
@click.option(
    '--watch-dir',
    '-d',
    type=click.Path(path_type=Path),
    default=Path('./watched'),
    help='Directory to monitor (will be created if it doesn\'t exist)',
)
@click.option('--duration', '-t', type=int, default=60, help='Duration to run the demo in seconds')
@click.option('--interval', '-i', type=float, default=1.0, help='Seconds between scans')
@click.option('--ignore', '-x', multiple=True, help='Name pattern to ignore (repeatable)')
@click.option('--create-samples', '-s', is_flag=True, help='Create sample files before watching')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def main(watch_dir: Path, duration: int, interval: float, ignore: tuple[str, ...], create_samples: bool, verbose: bool):
    """
    Run the alteration monitor demonstration.

    Example usage:

        # Watch ./watched for 60 seconds
        python examples/file_monitoring_demo.py

        # Watch a docs tree for 2 minutes, ignoring temp files
        python examples/file_monitoring_demo.py -d /path/to/docs -t 120 -x '*.tmp'
    """
    log_config = MonitorConfig(log_level="DEBUG" if verbose else "INFO").get_log_config()
    logging.config.dictConfig(log_config)

    watch_dir.mkdir(parents=True, exist_ok=True)
    try:
        if create_samples:
            create_sample_files(watch_dir)
        demonstrate_monitoring(watch_dir, duration, interval, ignore)
    except KeyboardInterrupt:
        console.print("\n[yellow]Demo interrupted by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Demo failed:[/red] {e}")
        logger.exception("Full error details:")
        raise SystemExit(1) from e

    console.print("\n[bold green]Demo completed successfully![/bold green]")


if __name__ == '__main__':
    main()
