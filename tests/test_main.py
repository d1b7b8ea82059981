"""Tests for the command-line entry point."""
import io
import json
import unittest
import tempfile
import shutil
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from spendwise import main as cli
from spendwise.config.settings import DEFAULT_CONFIG_PATH, AppSettings
from spendwise.storage import SQLiteRecordStore


class FakeCompletionClient:
    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.calls = []

    async def complete(self, model, messages, temperature, max_tokens):
        self.calls.append((messages, temperature, max_tokens))
        return self.replies.pop(0)


class TestCli(unittest.TestCase):
    """Test CLI commands against a temporary database."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = Path(tempfile.mkdtemp())
        self.settings = replace(
            AppSettings.load(DEFAULT_CONFIG_PATH),
            database_file=str(self.test_dir / "test.db")
        )
        self.store = SQLiteRecordStore(self.settings.database_path)
        self.client = FakeCompletionClient()

        patches = [
            mock.patch.object(cli, "get_settings", return_value=self.settings),
            mock.patch.object(cli, "get_api_key", return_value="test-key"),
        ]
        self.client_factory = mock.patch.object(cli, "CompletionClient", return_value=self.client).start()
        for patcher in patches:
            patcher.start()
        self.addCleanup(mock.patch.stopall)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def recent(self, external_id):
        user_id = self.store.find_user(external_id)
        since = datetime.now(timezone.utc) - timedelta(days=30)
        return self.store.fetch_recent(user_id, since, 50) if user_id else []

    def test_insights_without_identity_exits_1(self):
        code, out, err = self.run_cli("insights")

        self.assertEqual(code, 1)
        self.assertIn("User not authenticated", err)
        self.assertEqual(out, "")
        self.assertEqual(self.client.calls, [])

    def test_insights_printed_as_json(self):
        alice = self.store.get_or_create_user("alice")
        self.store.add_record(alice, 42.5, "Groceries", "Food")
        self.client.replies = [
            '[{"type": "tip", "title": "Food Budget", "message": "You spent $42.50 on food."}]',
            "Plan meals ahead to trim grocery costs.",
        ]

        code, out, _ = self.run_cli("insights", "--user", "alice")

        self.assertEqual(code, 0)
        insights = json.loads(out)
        self.assertEqual(len(insights), 1)
        self.assertEqual(insights[0]["title"], "Food Budget")
        self.assertEqual(insights[0]["aiAnswer"], "Plan meals ahead to trim grocery costs.")

    def test_insights_no_data_onboarding(self):
        code, out, _ = self.run_cli("insights", "--user", "newcomer")

        self.assertEqual(code, 0)
        self.assertEqual([i["id"] for i in json.loads(out)], ["welcome-1", "welcome-2"])
        self.assertEqual(self.client.calls, [])

    def test_add_expense_auto_categorized(self):
        """Missing category is filled in by the categorizer."""
        self.client.replies = ["Transportation"]

        code, out, _ = self.run_cli("add-expense", "--user", "alice", "--amount", "18", "--text", "Taxi home")

        self.assertEqual(code, 0)
        self.assertIn("Transportation", out)
        records = self.recent("alice")
        self.assertEqual([(r.amount, r.category, r.text) for r in records], [(18.0, "Transportation", "Taxi home")])
        messages, temperature, max_tokens = self.client.calls[0]
        self.assertEqual((temperature, max_tokens), (0.0, 8))

    def test_add_expense_explicit_category(self):
        code, _, _ = self.run_cli(
            "add-expense", "--user", "alice", "--amount", "5", "--text", "Coffee", "--category", "Food"
        )

        self.assertEqual(code, 0)
        self.assertEqual(self.recent("alice")[0].category, "Food")
        self.client_factory.assert_not_called()

    def test_add_expense_invalid_date(self):
        code, _, err = self.run_cli(
            "add-expense", "--user", "alice", "--amount", "5", "--text", "Coffee",
            "--category", "Food", "--date", "next tuesday"
        )

        self.assertEqual(code, 1)
        self.assertIn("Invalid date", err)
        self.assertEqual(self.recent("alice"), [])

    def test_list_expenses(self):
        alice = self.store.get_or_create_user("alice")
        self.store.add_record(alice, 12, "Lunch", None, datetime(2025, 5, 1, tzinfo=timezone.utc))

        code, out, _ = self.run_cli("list-expenses", "--user", "alice")

        self.assertEqual(code, 0)
        self.assertIn("Total: 1 expenses", out)
        self.assertIn("2025-05-01", out)
        self.assertIn("Other", out)

    def test_clear_blank_user_rejected(self):
        """A blank user id never falls through to clearing every user."""
        for external_id in ("alice", "bob"):
            self.store.add_record(self.store.get_or_create_user(external_id), 5, "Coffee")

        code, _, err = self.run_cli("clear-expenses", "--user", " ")

        self.assertEqual(code, 1)
        self.assertIn("User not authenticated", err)
        self.assertEqual(len(self.recent("alice")), 1)
        self.assertEqual(len(self.recent("bob")), 1)

    def test_clear_unknown_user_not_provisioned(self):
        code, _, _ = self.run_cli("clear-expenses", "--user", "ghost")

        self.assertEqual(code, 1)
        self.assertIsNone(self.store.find_user("ghost"))

    def test_clear_single_user(self):
        for external_id in ("alice", "bob"):
            self.store.add_record(self.store.get_or_create_user(external_id), 5, "Coffee")

        code, out, _ = self.run_cli("clear-expenses", "--user", "alice")

        self.assertEqual(code, 0)
        self.assertIn("Cleared 1 expenses for user: alice", out)
        self.assertEqual(self.recent("alice"), [])
        self.assertEqual(len(self.recent("bob")), 1)

    def test_clear_all_users(self):
        for external_id in ("alice", "bob"):
            self.store.add_record(self.store.get_or_create_user(external_id), 5, "Coffee")

        code, out, _ = self.run_cli("clear-expenses")

        self.assertEqual(code, 0)
        self.assertIn("Cleared 2 expenses (all users)", out)


if __name__ == "__main__":
    unittest.main()
