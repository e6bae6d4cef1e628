"""
Tests for the command-line interface.
"""

from decimal import Decimal

import pytest
from typer.testing import CliRunner

from cli import app
from rest_api.models import MenuItem
from rest_api.repositories import SqlDocumentStore
from rest_api.services.domain import Cart, OrderService
from shared.config.constants import PaymentStatus
from shared.infrastructure.db import create_db_engine, create_session_factory
from shared.security.auth import verify_jwt

runner = CliRunner()


@pytest.fixture
def database_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    result = runner.invoke(app, ["init-db", "--database-url", url])
    assert result.exit_code == 0, result.output
    return url


@pytest.fixture
def placed_orders(database_url):
    engine = create_db_engine(database_url)
    try:
        service = OrderService(SqlDocumentStore(create_session_factory(engine)), "r1")
        dal = MenuItem("m1", "Dal", "Mains", Decimal("80"), Decimal("140"))
        for qty, payment in [(1, PaymentStatus.COMPLETED), (2, PaymentStatus.PENDING)]:
            cart = Cart()
            cart.set_quantity(dal, "half", qty)
            service.place_order(cart, payment=payment)
    finally:
        engine.dispose()
    return database_url


class TestCli:

    def test_issue_token(self):
        result = runner.invoke(app, ["issue-token", "owner-9", "--email", "chef@example.com"])
        assert result.exit_code == 0
        claims = verify_jwt(result.output.strip())
        assert claims["sub"] == "owner-9"

    def test_export_to_stdout(self, placed_orders):
        result = runner.invoke(app, ["export-orders", "r1", "--database-url", placed_orders])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0] == "Order #,Date,Total,Payment,Status,Items"
        assert lines[1].startswith('"2",')
        assert lines[1].endswith('"160","pending","pending","Dal x2"')

    def test_export_filtered_to_directory(self, placed_orders, tmp_path):
        result = runner.invoke(
            app,
            ["export-orders", "r1", "--filter", "paid", "-o", str(tmp_path), "--database-url", placed_orders],
        )
        assert result.exit_code == 0, result.output
        exported = list(tmp_path.glob("orders-*.csv"))
        assert len(exported) == 1
        assert exported[0].read_text(encoding="utf-8").count("\n") == 2

    def test_export_window_excludes_other_days(self, placed_orders):
        result = runner.invoke(
            app,
            ["export-orders", "r1", "--start", "2000-01-01", "--end", "2000-01-02", "--database-url", placed_orders],
        )
        assert result.exit_code == 0
        assert result.output == "Order #,Date,Total,Payment,Status,Items\n"

    def test_export_unknown_filter(self, placed_orders):
        result = runner.invoke(app, ["export-orders", "r1", "--filter", "nope", "--database-url", placed_orders])
        assert result.exit_code == 2

    def test_summary(self, placed_orders):
        result = runner.invoke(app, ["summary", "r1", "--database-url", placed_orders])
        assert result.exit_code == 0, result.output
        assert "240" in result.output
        assert "last_hour" in result.output
