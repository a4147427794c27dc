#!/usr/bin/env python3
import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .categories import DEFAULT_TAXONOMY, SPECIAL_CASES, all_categories
from .config import build_classifier, depreciation_months, get_config, load_config, pdf_password
from .finalizer import finalize_all
from .models import EXPENSE, FinancialReport, Transaction
from .parsers import DEFAULT_BANK, StatementError, list_available_parsers
from .pipeline import format_parse_summary, parse_statement, process_and_categorize_transactions
from .report import filter_by_date_range, generate_financial_report
from .watcher import StatementWatcher, process_existing


console = Console()


def _money(amount: float) -> str:
    return f"{amount:,.2f} ₸".replace(",", " ")


def _signed_money(tx: Transaction) -> str:
    if tx.type == EXPENSE:
        return f"[red]-{_money(tx.amount)}[/red]"
    return f"[green]+{_money(tx.amount)}[/green]"


def _progress(message: str) -> None:
    console.print(f"[dim]{message}[/dim]")


def _load_transactions(args: argparse.Namespace, config: dict) -> list[Transaction]:
    return process_and_categorize_transactions(
        args.file,
        progress_callback=_progress if args.verbose else None,
        classifier=build_classifier(config),
        password=pdf_password(config),
    )


def _build_report(args: argparse.Namespace, config: dict) -> tuple[list[Transaction], FinancialReport]:
    transactions = _load_transactions(args, config)
    transactions = filter_by_date_range(transactions, args.date_from, args.date_to)
    report = generate_financial_report(transactions, depreciation_months=depreciation_months(config))
    return transactions, report


def cmd_parse(args: argparse.Namespace, config: dict) -> None:
    """Parse a statement and list its categorized transactions."""
    data = parse_statement(
        args.file,
        progress_callback=_progress if args.verbose else None,
        password=pdf_password(config),
    )
    transactions = finalize_all(data.transactions, build_classifier(config))

    table = Table(title=f"Transactions in {Path(args.file).name} ({len(transactions)})")
    table.add_column("Date", style="cyan")
    table.add_column("Description")
    table.add_column("Amount", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Counterparty")
    table.add_column("Activity", style="dim")

    for tx in transactions[:args.limit]:
        table.add_row(
            tx.date,
            tx.description[:50],
            _signed_money(tx),
            tx.category,
            tx.counterparty[:30],
            tx.transaction_type,
        )

    console.print(table)
    console.print(f"[bold]{format_parse_summary(data)}[/bold]")

    if args.verbose:
        for skipped in data.skipped:
            console.print(f"[dim]  skipped ({skipped.reason}): {skipped.line[:80]}[/dim]")


def cmd_report(args: argparse.Namespace, config: dict) -> None:
    """Print the financial statements for a statement file."""
    transactions, report = _build_report(args, config)

    if not transactions:
        console.print("[yellow]No transactions in the selected period.[/yellow]")
        return

    console.print(
        f"[bold]Period: {report.date_range.start} - {report.date_range.end} "
        f"({len(transactions)} transactions)[/bold]\n"
    )

    pnl = report.pnl
    table = Table(title="Profit and Loss")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Revenue", _money(pnl.total_revenue))
    table.add_row("Operating Expenses", _money(pnl.total_operating_expenses))
    table.add_row("Operating Profit", _money(pnl.operating_profit))
    table.add_row("Depreciation", _money(pnl.depreciation))
    table.add_row("Net Profit", _money(pnl.net_profit))
    table.add_row("Operating Margin", f"{pnl.operating_margin:.1%}")
    table.add_row("Net Margin", f"{pnl.net_margin:.1%}")
    console.print(table)

    table = Table(title="Monthly Results")
    table.add_column("Month", style="cyan")
    table.add_column("Revenue", justify="right", style="green")
    table.add_column("Expenses", justify="right", style="red")
    table.add_column("Profit", justify="right")
    table.add_column("Inflow", justify="right")
    table.add_column("Outflow", justify="right")
    for pnl_month, cash_month in zip(pnl.monthly_data, report.cash_flow.monthly_data):
        table.add_row(
            pnl_month.month,
            _money(pnl_month.revenue),
            _money(pnl_month.expenses),
            _money(pnl_month.profit),
            _money(cash_month.inflow),
            _money(cash_month.outflow),
        )
    console.print(table)

    if pnl.expense_by_category:
        table = Table(title="Expenses by Category")
        table.add_column("Category", style="magenta")
        table.add_column("Amount", justify="right", style="red")
        for item in pnl.expense_by_category:
            table.add_row(item.name, _money(item.value))
        console.print(table)

    cash_flow = report.cash_flow
    table = Table(title="Cash Flow")
    table.add_column("Activity")
    table.add_column("Amount", justify="right")
    table.add_row("Operating", _money(cash_flow.operating_activities))
    table.add_row("Investing", _money(cash_flow.investing_activities))
    table.add_row("Financing", _money(cash_flow.financing_activities))
    table.add_row("[bold]Net Cash Flow[/bold]", f"[bold]{_money(cash_flow.net_cash_flow)}[/bold]")
    console.print(table)

    sheet = report.balance_sheet
    table = Table(title="Balance Sheet")
    table.add_column("Item")
    table.add_column("Amount", justify="right")
    table.add_row("Cash", _money(sheet.assets.cash))
    table.add_row("Receivables", _money(sheet.assets.receivables))
    table.add_row("Equipment (net)", _money(sheet.assets.net_equipment))
    table.add_row("[bold]Total Assets[/bold]", f"[bold]{_money(sheet.assets.total_assets)}[/bold]")
    table.add_row("Payables", _money(sheet.liabilities.total_liabilities))
    table.add_row("Retained Earnings", _money(sheet.equity.retained_earnings))
    table.add_row("Owner Contributions", _money(sheet.equity.owner_contributions))
    table.add_row(
        "[bold]Total Liabilities and Equity[/bold]",
        f"[bold]{_money(sheet.total_liabilities_and_equity)}[/bold]",
    )
    console.print(table)
    if not sheet.is_balanced:
        console.print(f"[yellow]Balance sheet is off by {_money(sheet.imbalance)}[/yellow]")

    if report.counterparty_report:
        table = Table(title="Counterparties")
        table.add_column("Name")
        table.add_column("Income", justify="right", style="green")
        table.add_column("Expense", justify="right", style="red")
        table.add_column("Balance", justify="right")
        for entry in report.counterparty_report[:args.limit]:
            table.add_row(entry.name, _money(entry.income), _money(entry.expense), _money(entry.balance))
        console.print(table)

    debts = report.debt_report
    if debts.receivables or debts.payables:
        table = Table(title="Debts")
        table.add_column("Counterparty")
        table.add_column("Owed to us", justify="right", style="green")
        table.add_column("Owed by us", justify="right", style="red")
        for entry in debts.receivables:
            table.add_row(entry.counterparty, _money(entry.amount), "-")
        for entry in debts.payables:
            table.add_row(entry.counterparty, "-", _money(entry.amount))
        console.print(table)


def cmd_export(args: argparse.Namespace, config: dict) -> None:
    """Export categorized transactions and the financial report to a file."""
    transactions, report = _build_report(args, config)

    export_data = {
        "transactions": [tx.to_dict() for tx in transactions],
        "report": report.to_dict(),
    }

    output_path = Path(args.output)
    file_format = args.format or output_path.suffix.lstrip(".") or "json"

    if file_format in ("yaml", "yml"):
        content = yaml.dump(export_data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    else:
        content = json.dumps(export_data, indent=2, ensure_ascii=False)

    output_path.write_text(content, encoding="utf-8")
    console.print(f"[green]Exported {len(transactions)} transactions to {output_path}[/green]")


def cmd_categories(args: argparse.Namespace, config: dict) -> None:
    """Show the category taxonomy and its keywords."""
    keywords: dict[str, list[str]] = {}
    for category, words in (*SPECIAL_CASES, *DEFAULT_TAXONOMY):
        keywords.setdefault(category, []).extend(words)

    for pattern, category in (config.get("classification_rules") or {}).items():
        keywords.setdefault(category, []).append(f"{pattern} (rule)")

    table = Table(title="Transaction Categories")
    table.add_column("Category", style="magenta")
    table.add_column("Keywords", style="dim")

    for category in all_categories():
        table.add_row(category, ", ".join(keywords.get(category, [])) or "-")

    console.print(table)


def cmd_banks(args: argparse.Namespace, config: dict) -> None:
    """List the bank statement layouts that can be recognized."""
    parsers = list_available_parsers()

    console.print("[bold]Available Bank Parsers:[/bold]")
    for parser in parsers:
        marker = " [green](fallback)[/green]" if parser == DEFAULT_BANK else ""
        console.print(f"  - {parser}{marker}")

    if not parsers:
        console.print("  [dim]No parsers available[/dim]")


def cmd_watch(args: argparse.Namespace, config: dict) -> None:
    """Watch a directory and summarize every statement dropped into it."""
    classifier = build_classifier(config)

    if args.existing:
        count = process_existing(
            args.directory,
            classifier=classifier,
            pdf_password=pdf_password(config),
            console=console,
            depreciation_months=depreciation_months(config),
        )
        console.print(f"\n[bold]Processed {count} existing statement(s)[/bold]\n")

    watcher = StatementWatcher(
        statements_dir=args.directory,
        classifier=classifier,
        pdf_password=pdf_password(config),
        console=console,
        depreciation_months=depreciation_months(config),
    )
    watcher.start()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _add_period_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument("--from", dest="date_from", help="Start date, inclusive (YYYY-MM-DD)")
    subparser.add_argument("--to", dest="date_to", help="End date, inclusive (YYYY-MM-DD)")


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Statement Ledger - Categorize bank statements and build financial reports",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s parse kaspi.pdf                  List categorized transactions
  %(prog)s report export.csv                Show P&L, cash flow and balance sheet
  %(prog)s report halyk.pdf --from 2024-01-01 --to 2024-03-31
  %(prog)s export kaspi.pdf report.json     Export transactions and reports
  %(prog)s watch statements/                Summarize new statements as they arrive
        """
    )

    parser.add_argument(
        "-c", "--config",
        help="Path to config file (default: config.yaml if present)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show progress messages and debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="List transactions in a statement")
    parse_parser.add_argument("file", help="Path to a .csv or .pdf statement")
    parse_parser.add_argument("-n", "--limit", type=int, help="Number of transactions to show")

    # Report command
    report_parser = subparsers.add_parser("report", help="Show financial statements")
    report_parser.add_argument("file", help="Path to a .csv or .pdf statement")
    report_parser.add_argument("-n", "--limit", type=int, default=20, help="Number of counterparties to show")
    _add_period_arguments(report_parser)

    # Export command
    export_parser = subparsers.add_parser("export", help="Export transactions and reports to a file")
    export_parser.add_argument("file", help="Path to a .csv or .pdf statement")
    export_parser.add_argument("output", help="Output file path (e.g., report.json or report.yaml)")
    export_parser.add_argument("--format", choices=["json", "yaml"], help="Output format (auto-detected from extension)")
    _add_period_arguments(export_parser)

    # Categories command
    subparsers.add_parser("categories", help="Show categories and keywords")

    # Banks command
    subparsers.add_parser("banks", help="List recognized bank statement layouts")

    # Watch command
    watch_parser = subparsers.add_parser("watch", help="Watch a directory for new statements")
    watch_parser.add_argument("directory", help="Directory to watch")
    watch_parser.add_argument("--existing", action="store_true", help="Process files already in the directory first")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    _configure_logging(args.verbose)

    # Load config
    try:
        config = load_config(args.config) if args.config else get_config()
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {args.config}[/red]")
        console.print("[dim]Create config.yaml or specify path with -c[/dim]")
        sys.exit(1)

    # Dispatch command
    commands = {
        "parse": cmd_parse,
        "report": cmd_report,
        "export": cmd_export,
        "categories": cmd_categories,
        "banks": cmd_banks,
        "watch": cmd_watch,
    }

    cmd_func = commands.get(args.command)
    if not cmd_func:
        parser.print_help()
        return

    try:
        cmd_func(args, config)
    except (StatementError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
