"""Command-line entry point."""
import argparse
import asyncio
import json
import sys
from datetime import datetime, timedelta
from typing import Optional

from spendwise.config import AppSettings, get_api_key, get_settings
from spendwise.llm import CompletionClient, ExpenseCategorizer
from spendwise.orchestrator import InsightsOrchestrator
from spendwise.storage import SessionIdentityResolver, SQLiteRecordStore
from spendwise.utils.logger import configure_logging
from spendwise.utils.exceptions import AuthenticationError, SpendwiseError


def insights_command(settings: AppSettings, store: SQLiteRecordStore, user: Optional[str]) -> int:
    """Print the insight list for a user as JSON."""
    client = CompletionClient(get_api_key())
    orchestrator = InsightsOrchestrator.from_settings(
        settings,
        SessionIdentityResolver(store),
        store,
        client
    )

    try:
        insights = asyncio.run(orchestrator.get_insights({"user_id": user}))
    except AuthenticationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps([insight.to_dict() for insight in insights], indent=2, ensure_ascii=False))
    return 0


def add_expense_command(settings: AppSettings, store: SQLiteRecordStore, args) -> int:
    """Store an expense, categorizing it with the LLM when no category is given."""
    user_id = SessionIdentityResolver(store).resolve({"user_id": args.user})
    if not user_id:
        print("Error: User not authenticated", file=sys.stderr)
        return 1

    try:
        date = datetime.fromisoformat(args.date) if args.date else None
    except ValueError:
        print(f"Error: Invalid date '{args.date}', expected ISO format (YYYY-MM-DD)", file=sys.stderr)
        return 1

    category = args.category
    if not category:
        categorizer = ExpenseCategorizer(
            CompletionClient(get_api_key()),
            settings.llm_model_name,
            temperature=settings.categorize_temperature,
            max_tokens=settings.categorize_max_tokens
        )
        category = asyncio.run(categorizer.categorize(args.text))

    record = store.add_record(user_id, args.amount, args.text, category=category, date=date)
    print(f"✓ Added {record.amount:.2f} ({record.category}) {record.text}")
    return 0


def list_expenses_command(settings: AppSettings, store: SQLiteRecordStore, user: str) -> int:
    """Print the records that would feed the next insights request."""
    user_id = SessionIdentityResolver(store).resolve({"user_id": user})
    if not user_id:
        print("Error: User not authenticated", file=sys.stderr)
        return 1

    since = datetime.now().astimezone() - timedelta(days=settings.lookback_days)
    records = store.fetch_recent(user_id, since, settings.max_records)
    if not records:
        print("No expenses found.")
        return 0

    print(f"\nTotal: {len(records)} expenses")
    print(f"{'Date':<12} {'Category':<16} {'Amount':>10}  Description")
    print("-" * 70)
    for record in records:
        print(
            f"{record.date.strftime('%Y-%m-%d'):<12} {record.category or 'Other':<16} "
            f"{record.amount:>10.2f}  {record.text}"
        )
    return 0


def clear_expenses_command(store: SQLiteRecordStore, user: Optional[str]) -> int:
    """Delete stored expenses for a user, or for everyone when no user is given."""
    if user is None:
        deleted = store.clear()
        print(f"✓ Cleared {deleted} expenses (all users)")
        return 0

    user_id = store.find_user(user.strip()) if user.strip() else None
    if not user_id:
        print("Error: User not authenticated", file=sys.stderr)
        return 1

    deleted = store.clear(user_id)
    print(f"✓ Cleared {deleted} expenses for user: {user.strip()}")
    return 0


def main(argv=None) -> int:
    """Main entry point for the Spendwise CLI."""
    parser = argparse.ArgumentParser(description="Spendwise AI spending insights")
    subparsers = parser.add_subparsers(dest="command", required=True)

    insights_parser = subparsers.add_parser("insights", help="Generate insights for a user")
    insights_parser.add_argument("--user", help="External user ID")

    add_parser = subparsers.add_parser("add-expense", help="Record an expense")
    add_parser.add_argument("--user", required=True, help="External user ID")
    add_parser.add_argument("--amount", required=True, type=float, help="Expense amount")
    add_parser.add_argument("--text", required=True, help="Expense description")
    add_parser.add_argument("--category", help="Category (auto-detected if omitted)")
    add_parser.add_argument("--date", help="Expense date, ISO format (default: now)")

    list_parser = subparsers.add_parser("list-expenses", help="List recent expenses")
    list_parser.add_argument("--user", required=True, help="External user ID")

    clear_parser = subparsers.add_parser("clear-expenses", help="Delete stored expenses")
    clear_parser.add_argument("--user", help="External user ID (default: all users)")

    args = parser.parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(
            settings.log_level,
            settings.log_dir,
            settings.log_max_file_size_mb,
            settings.log_backup_count
        )
        store = SQLiteRecordStore(settings.database_path)

        if args.command == "insights":
            return insights_command(settings, store, args.user)
        if args.command == "add-expense":
            return add_expense_command(settings, store, args)
        if args.command == "list-expenses":
            return list_expenses_command(settings, store, args.user)
        return clear_expenses_command(store, args.user)
    except SpendwiseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
