"""CLI commands for the productivity tracker using Typer."""

from __future__ import annotations

import asyncio
import logging
import shlex
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from productivity_tracker import __version__
from productivity_tracker.core.config import get_config
from productivity_tracker.core.orchestrator import SessionOrchestrator
from productivity_tracker.core.session_log import LogEntry
from productivity_tracker.errors import TrackerError
from productivity_tracker.timer.engine import SessionMode, format_seconds

# Initialize Typer app
app = typer.Typer(
    name="productivity-tracker",
    help="Personal time tracking with stopwatch and Pomodoro timers.",
    add_completion=False,
)

console = Console()

logger = logging.getLogger(__name__)

SHELL_HELP = """[bold]Commands[/bold]
  name <text>       Set the task name
  category <text>   Set the project / category
  start             Start (or continue) the stopwatch
  focus             Start a focus period (a break follows automatically)
  break             Start a break period
  pause / resume    Pause or resume the current timer
  stop              Stop the timer and log a stopwatch run
  status            Show the timer
  log               Show logged sessions
  report            Generate a productivity report
  export [path]     Export the log as CSV
  help              Show this help
  quit              Leave"""


def setup_logging(log_level: str, log_file: Path | None = None) -> None:
    """Configure logging for the application."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))
    else:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Reduce noise from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


class TrackerShell:
    """Line-oriented front end driving one SessionOrchestrator.

    Commands run synchronously on the event loop thread; report and export
    run as background tasks so the timer keeps ticking while they wait.
    """

    def __init__(self, orchestrator: SessionOrchestrator, console: Console):
        self.orchestrator = orchestrator
        self.console = console
        self._pending: set[asyncio.Task] = set()

        orchestrator.on_entry_logged = self._on_entry_logged
        orchestrator.on_period_end = self._on_period_end

    def dispatch(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should exit."""
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.console.print(f"[red]{e}[/red]")
            return True
        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        orchestrator = self.orchestrator

        try:
            if command in ("quit", "exit", "q"):
                return False
            elif command == "help":
                self.console.print(SHELL_HELP)
            elif command == "name":
                orchestrator.task_name = " ".join(args)
                self.console.print(f"Task: [cyan]{escape(orchestrator.task_name) or '-'}[/cyan]")
            elif command == "category":
                orchestrator.category = " ".join(args)
                self.console.print(f"Category: [cyan]{escape(orchestrator.category) or '-'}[/cyan]")
            elif command == "start":
                orchestrator.start()
                self.print_status()
            elif command == "focus":
                orchestrator.start(pomodoro=True)
                self.print_status()
            elif command == "break":
                orchestrator.start_break()
                self.print_status()
            elif command == "pause":
                orchestrator.pause()
                self.print_status()
            elif command == "resume":
                orchestrator.resume()
                self.print_status()
            elif command == "stop":
                entry = orchestrator.stop()
                if entry is None:
                    self.console.print("[dim]Timer stopped, nothing logged[/dim]")
            elif command == "status":
                self.print_status()
            elif command == "log":
                self.print_log()
            elif command == "report":
                self._spawn(self._report())
            elif command == "export":
                path = Path(args[0]) if args else None
                self._spawn(self._export(path))
            else:
                self.console.print(f"[red]Unknown command: {command}[/red] (try 'help')")
        except TrackerError as e:
            self.console.print(f"[red]{e}[/red]")

        return True

    def print_status(self) -> None:
        orchestrator = self.orchestrator
        state = "running" if orchestrator.is_running else "paused"
        if orchestrator.engine.phase.is_idle:
            state = "idle"
        self.console.print(
            f"[bold]{format_seconds(orchestrator.time)}[/bold] "
            f"{orchestrator.mode.value} ({state})"
        )

    def print_log(self) -> None:
        entries = self.orchestrator.log.snapshot()
        if not entries:
            self.console.print("[dim]No sessions logged yet[/dim]")
            return

        table = Table(title="Task Log", show_header=True, header_style="bold cyan")
        table.add_column("Task")
        table.add_column("Category")
        table.add_column("Duration", justify="right")
        table.add_column("Logged")

        for entry in entries:
            table.add_row(
                escape(entry.task_name),
                escape(entry.category),
                format_seconds(entry.duration),
                entry.timestamp.strftime("%H:%M:%S"),
            )

        self.console.print(table)
        self.console.print(f"Total: [bold]{format_seconds(self.orchestrator.log.total_seconds)}[/bold]")

    async def wait_pending(self) -> None:
        """Wait for outstanding report/export tasks."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _report(self) -> None:
        orchestrator = self.orchestrator
        if orchestrator.report_in_flight:
            self.console.print("[yellow]Report already in progress[/yellow]")
            return

        self.console.print("[dim]Generating report...[/dim]")
        try:
            report = await orchestrator.generate_report()
        except TrackerError as e:
            self.console.print(f"[red]{e}[/red]")
            return

        self.console.print(Panel(
            f"Total time: [bold]{report.total_hours}h {report.total_minutes}m[/bold]\n"
            f"Top category: [bold]{escape(report.top_category)}[/bold]\n\n"
            f"{escape(report.summary)}",
            title="Productivity Report",
            border_style="green",
        ))

    async def _export(self, path: Path | None) -> None:
        orchestrator = self.orchestrator
        if orchestrator.export_in_flight:
            self.console.print("[yellow]Export already in progress[/yellow]")
            return

        self.console.print("[dim]Preparing export...[/dim]")
        try:
            written = await orchestrator.export_csv(path)
        except (TrackerError, OSError) as e:
            self.console.print(f"[red]{e}[/red]")
            return

        self.console.print(f"[green]Exported to {written}[/green]")

    def _on_entry_logged(self, entry: LogEntry) -> None:
        self.console.print(
            f"[green]Logged[/green] {escape(entry.task_name)} ({escape(entry.category)}) "
            f"{format_seconds(entry.duration)}"
        )

    def _on_period_end(self, mode: SessionMode) -> None:
        if mode == SessionMode.FOCUS:
            self.console.print("[bold green]Focus period complete! Break started.[/bold green]")
        else:
            self.console.print("[bold green]Break over.[/bold green] Type 'focus' to start the next period.")


def _read_line() -> str | None:
    try:
        return console.input("[bold cyan]> [/bold cyan]")
    except EOFError:
        return None


async def run_shell(shell: TrackerShell) -> None:
    """Read commands without blocking the event loop, so ticks keep flowing."""
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, _read_line)
        if line is None or not shell.dispatch(line):
            break
    await shell.wait_pending()


@app.command()
def track(
    pomodoro: bool = typer.Option(
        False,
        "--pomodoro",
        "-p",
        help="Start a focus period right away",
    ),
    name: str = typer.Option(None, "--name", "-n", help="Task name"),
    category: str = typer.Option(None, "--category", "-c", help="Project / category"),
    local: bool = typer.Option(
        False,
        "--local",
        help="Use the offline summarizer and exporter instead of Claude",
    ),
    log_level: str = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Log level (DEBUG, INFO, WARNING, ERROR)",
    ),
) -> None:
    """Track time interactively with a stopwatch or Pomodoro timer."""
    config = get_config()
    if local:
        config = config.model_copy(
            update={"summarization": config.summarization.model_copy(update={"provider": "local"})}
        )

    setup_logging(log_level or config.log_level, config.log_dir / "tracker.log")

    async def run_tracker() -> None:
        orchestrator = SessionOrchestrator(config=config)
        orchestrator.task_name = name or ""
        orchestrator.category = category or ""

        shell = TrackerShell(orchestrator, console)
        console.print("[bold]Productivity Tracker[/bold] - type 'help' for commands\n")

        if pomodoro:
            shell.dispatch("focus")

        try:
            await run_shell(shell)
        finally:
            orchestrator.pause()

    try:
        asyncio.run(run_tracker())
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")


@app.command()
def config_show() -> None:
    """Show current configuration."""
    config = get_config()

    table = Table(title="Productivity Tracker Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value")

    # Paths
    table.add_row("[bold]Paths[/bold]", "")
    table.add_row("  Config File", str(config.config_file))
    table.add_row("  Log Directory", str(config.log_dir))
    table.add_row("  Export File", str(config.export_path))

    # Timer
    table.add_row("[bold]Timer[/bold]", "")
    table.add_row("  Focus", format_seconds(config.timer.focus_seconds))
    table.add_row("  Break", format_seconds(config.timer.break_seconds))

    # Summarization
    table.add_row("[bold]Summarization[/bold]", "")
    table.add_row("  Provider", config.summarization.provider)
    table.add_row("  Model", config.summarization.model)
    table.add_row("  API Key", "***" if config.claude_api_key else "[yellow]Not Set[/yellow]")

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Productivity Tracker v{__version__}")


if __name__ == "__main__":
    app()
