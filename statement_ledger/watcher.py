"""Directory watcher that summarizes statements as they are dropped in."""

import time
from pathlib import Path

from rich.console import Console
from watchdog.events import FileCreatedEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .classifier import CategoryClassifier
from .finalizer import finalize_all
from .pipeline import SUPPORTED_EXTENSIONS, format_parse_summary, parse_statement
from .report import DEPRECIATION_MONTHS, generate_financial_report


def summarize_statement(
    path: Path,
    classifier: CategoryClassifier,
    console: Console,
    pdf_password: str | None = None,
    depreciation_months: int = DEPRECIATION_MONTHS,
) -> bool:
    """Parse one statement and print its headline figures.

    Returns:
        True if the statement was processed, False if it failed
    """
    console.print(f"[cyan]Processing {path.name}...[/cyan]")

    try:
        data = parse_statement(path, password=pdf_password)
        transactions = finalize_all(data.transactions, classifier)
        report = generate_financial_report(transactions, depreciation_months=depreciation_months)
    except Exception as e:
        console.print(f"[red]Error processing {path.name}: {e}[/red]")
        return False

    console.print(f"[green]{format_parse_summary(data)}[/green]")
    console.print(
        f"[dim]  {report.date_range.start} - {report.date_range.end}: "
        f"revenue {report.pnl.total_revenue:,.2f}, "
        f"net profit {report.pnl.net_profit:,.2f}, "
        f"net cash flow {report.cash_flow.net_cash_flow:,.2f}[/dim]"
    )
    return True


class StatementHandler(FileSystemEventHandler):
    """Handle new CSV and PDF files in the statements directory."""

    def __init__(
        self,
        classifier: CategoryClassifier,
        console: Console | None = None,
        pdf_password: str | None = None,
        depreciation_months: int = DEPRECIATION_MONTHS
    ):
        self.classifier = classifier
        self.console = console or Console()
        self._pdf_password = pdf_password
        self._depreciation_months = depreciation_months

    def on_created(self, event: FileCreatedEvent) -> None:
        """Handle file creation events."""
        if event.is_directory:
            return

        path = Path(event.src_path)

        if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            return

        # Wait a moment for file to be fully written
        time.sleep(0.5)

        summarize_statement(
            path, self.classifier, self.console, self._pdf_password, self._depreciation_months
        )


class StatementWatcher:
    """Watch a directory for new bank statements."""

    def __init__(
        self,
        statements_dir: str | Path,
        classifier: CategoryClassifier,
        pdf_password: str | None = None,
        console: Console | None = None,
        depreciation_months: int = DEPRECIATION_MONTHS
    ):
        self.statements_dir = Path(statements_dir)
        self.classifier = classifier
        self.console = console or Console()
        self._observer = None
        self._pdf_password = pdf_password
        self._depreciation_months = depreciation_months

    def start(self) -> None:
        """Start watching for new files."""
        if not self.statements_dir.exists():
            self.statements_dir.mkdir(parents=True)

        handler = StatementHandler(
            classifier=self.classifier,
            console=self.console,
            pdf_password=self._pdf_password,
            depreciation_months=self._depreciation_months
        )

        self._observer = Observer()
        self._observer.schedule(handler, str(self.statements_dir), recursive=False)
        self._observer.start()

        self.console.print(
            f"[green]Watching {self.statements_dir} for new statements...[/green]"
        )
        self.console.print("[dim]Press Ctrl+C to stop[/dim]\n")

        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stop()

    def stop(self) -> None:
        """Stop watching."""
        if self._observer:
            self._observer.stop()
            self._observer.join()
            self.console.print("\n[dim]Stopped watching.[/dim]")


def process_existing(
    statements_dir: str | Path,
    classifier: CategoryClassifier,
    pdf_password: str | None = None,
    console: Console | None = None,
    depreciation_months: int = DEPRECIATION_MONTHS
) -> int:
    """Summarize every statement already in the directory, in name order.

    Returns:
        Number of statements processed successfully
    """
    statements_dir = Path(statements_dir)
    console = console or Console()

    if not statements_dir.exists():
        statements_dir.mkdir(parents=True)
        console.print(f"[yellow]Created {statements_dir}[/yellow]")
        return 0

    files = sorted(
        path for path in statements_dir.iterdir()
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    )

    if not files:
        console.print(f"[yellow]No statements found in {statements_dir}[/yellow]")
        return 0

    return sum(
        1 for path in files
        if summarize_statement(path, classifier, console, pdf_password, depreciation_months)
    )
