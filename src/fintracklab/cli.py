"""
Command-line interface for FinTrackLab.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from fintracklab.book import FinanceBook
from fintracklab.config import load_settings
from fintracklab.core.errors import FinTrackError
from fintracklab.core.records import DateFilter
from fintracklab.store import load_book, save_book


def _open_book(args) -> FinanceBook:
    """Load the input book with the settings and clock given on the command line."""
    settings = load_settings(args.settings) if args.settings else None
    today = date.fromisoformat(args.today) if args.today else None
    return load_book(args.input, settings=settings, today=today)


def _save_json(path: str, data) -> None:
    """Save data as JSON to file path."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def cmd_example(_) -> int:
    """Print a small sample book JSON."""
    example = {
        "transactions": [
            {
                "id": "t-salary-mar",
                "date": "2024-03-05",
                "description": "Salary",
                "amount": 5000.0,
                "type": "income",
            },
            {
                "id": "t-rent-mar",
                "date": "2024-03-10",
                "description": "Rent",
                "amount": 1800.0,
                "type": "expense",
            },
            {
                "id": "t-groceries-mar",
                "date": "2024-03-18",
                "description": "Groceries",
                "amount": 1200.0,
                "type": "expense",
            },
        ],
        "allocations": [
            {
                "id": "a-etf",
                "date": "2024-03-20",
                "category": "investments",
                "amount": 1000.0,
                "interestRate": 8.0,
                "investmentType": "Stocks",
            },
            {
                "id": "a-buffer",
                "date": "2024-03-21",
                "category": "emergency_fund",
                "amount": 500.0,
            },
        ],
        "recurringTransactions": [
            {
                "id": "r-salary",
                "description": "Salary",
                "amount": 5000.0,
                "type": "income",
                "startDate": "2024-04-05",
            }
        ],
        "receivables": [],
        "reminders": [
            {
                "id": "m-internet",
                "description": "Internet",
                "amount": 60.0,
                "dueDay": 15,
                "paidMonths": [],
            }
        ],
        "filter": {"type": "all", "value": None},
    }
    json.dump(example, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def cmd_catch_up(args) -> int:
    """Materialize recurring transactions up to today and save the book."""
    try:
        book = _open_book(args)
        result = book.apply_catch_up()

        for tx in result.new_transactions:
            print(f"{tx.date.isoformat()}  {tx.type.value:<7}  {tx.amount:>12,.2f}  {tx.description}")
        print(f"Materialized {len(result.new_transactions)} entries")

        if result.changed and not args.dry_run:
            save_book(book, args.output or args.input)
        return 0

    except (FinTrackError, OSError, ValueError) as e:
        print(f"Error running catch-up: {e}", file=sys.stderr)
        return 1


def cmd_summary(args) -> int:
    """Print the financial summary for a date filter."""
    try:
        book = _open_book(args)
        date_filter = DateFilter.parse(args.filter) if args.filter else None
        summary = book.summary(date_filter)

        if args.json:
            json.dump(summary.to_dict(), sys.stdout, indent=2)
            sys.stdout.write("\n")
            return 0

        print(f"Income:       {summary.total_income:>14,.2f}")
        print(f"Expenses:     {summary.total_expenses:>14,.2f}")
        print(f"Balance:      {summary.total_balance:>14,.2f}")
        print(f"Savings rate: {summary.savings_rate:>13.1f}%")
        for category, amount in summary.allocations_by_type.items():
            print(f"  {category.value:<16}{amount:>12,.2f}")
        print(f"Allocated:    {summary.total_allocated:>14,.2f}")
        print(f"Unallocated:  {summary.unallocated:>14,.2f}")
        return 0

    except (FinTrackError, OSError, ValueError) as e:
        print(f"Error computing summary: {e}", file=sys.stderr)
        return 1


def cmd_investments(args) -> int:
    """Print the compounded value of investment allocations."""
    try:
        book = _open_book(args)
        inv = book.investments()

        if args.json:
            json.dump(
                {
                    "totalContributions": inv.total_contributions,
                    "currentValue": inv.current_value,
                    "growth": inv.growth,
                    "portfolioBreakdown": inv.portfolio_breakdown,
                },
                sys.stdout,
                indent=2,
            )
            sys.stdout.write("\n")
            return 0

        print(f"Contributions: {inv.total_contributions:>14,.2f}")
        print(f"Current value: {inv.current_value:>14,.2f}")
        print(f"Growth:        {inv.growth:>14,.2f}")
        for name, value in inv.portfolio_breakdown.items():
            print(f"  {name:<20}{value:>12,.2f}")
        return 0

    except (FinTrackError, OSError, ValueError) as e:
        print(f"Error valuing investments: {e}", file=sys.stderr)
        return 1


def cmd_project(args) -> int:
    """Project net worth and print or export the series."""
    try:
        book = _open_book(args)
        points = book.projection()

        if args.output:
            _save_json(args.output, [p.to_dict() for p in points])
            print(f"Projection saved to {args.output}")
            return 0

        for p in points:
            print(f"{p.date}  {p.value:>14,.2f}  {p.contributions:>14,.2f}  {p.growth:>14,.2f}")
        return 0

    except (FinTrackError, OSError, ValueError) as e:
        print(f"Error projecting net worth: {e}", file=sys.stderr)
        return 1


def _add_book_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-i", "--input", required=True, help="Input book (JSON or YAML)")
    parser.add_argument("--settings", help="Settings file (YAML or JSON)")
    parser.add_argument("--today", help="Override today's date (YYYY-MM-DD)")


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="fintracklab", description="FinTrackLab - personal finance computation engine"
    )
    parser.add_argument("--version", action="version", version="FinTrackLab 0.1.0")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log engine activity to stderr"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    example_parser = subparsers.add_parser("example", help="Print a sample book JSON")
    example_parser.set_defaults(func=cmd_example)

    catch_up_parser = subparsers.add_parser(
        "catch-up", help="Materialize recurring transactions up to today"
    )
    _add_book_arguments(catch_up_parser)
    catch_up_parser.add_argument(
        "-o", "--output", help="Write the updated book here instead of the input"
    )
    catch_up_parser.add_argument(
        "--dry-run", action="store_true", help="Show new entries without saving"
    )
    catch_up_parser.set_defaults(func=cmd_catch_up)

    summary_parser = subparsers.add_parser(
        "summary", help="Income, expenses, savings rate and allocations"
    )
    _add_book_arguments(summary_parser)
    summary_parser.add_argument(
        "--filter",
        help="Date filter: all, year:YYYY, month:YYYY-MM or day:YYYY-MM-DD "
        "(default: the book's stored filter)",
    )
    summary_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    summary_parser.set_defaults(func=cmd_summary)

    investments_parser = subparsers.add_parser(
        "investments", help="Compounded value of investment allocations"
    )
    _add_book_arguments(investments_parser)
    investments_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    investments_parser.set_defaults(func=cmd_investments)

    project_parser = subparsers.add_parser(
        "project", help="Project net worth month by month"
    )
    _add_book_arguments(project_parser)
    project_parser.add_argument("-o", "--output", help="Output projection JSON file")
    project_parser.set_defaults(func=cmd_project)

    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
