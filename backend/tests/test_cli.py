import json

from kasir.cli import SEED_CATEGORIES, SEED_PRODUCTS
from kasir.extensions import db, get_services
from kasir.models import TransactionRow


def test_seed_run_inserts_catalogue(sql_app):
    runner = sql_app.test_cli_runner()

    result = runner.invoke(args=["seed", "run"])

    assert result.exit_code == 0, result.output
    assert "DONE Seeding completed" in result.output
    services = get_services()
    assert len(services.categories.get_all()) == len(SEED_CATEGORIES)
    products = services.products.get_all()
    assert len(products) == len(SEED_PRODUCTS)
    assert products[0].name == "Indomie Goreng"
    assert products[0].category.name == "Makanan"


def test_seed_run_with_transactions(sql_app):
    runner = sql_app.test_cli_runner()

    result = runner.invoke(args=["seed", "run", "--transactions", "5", "--seed", "7"])

    assert result.exit_code == 0, result.output
    assert "PASS Seeded 5 transactions" in result.output
    assert db.session.query(TransactionRow).count() == 5


def test_seed_clear_replaces_data(sql_app):
    runner = sql_app.test_cli_runner()
    runner.invoke(args=["seed", "run"])

    result = runner.invoke(args=["seed", "run", "--clear"])

    assert result.exit_code == 0, result.output
    assert len(get_services().products.get_all()) == len(SEED_PRODUCTS)


def test_seed_requires_database(app):
    result = app.test_cli_runner().invoke(args=["seed", "run"])

    assert result.exit_code != 0
    assert "USE_DATABASE" in result.output


def test_reset_requires_confirmation(sql_app):
    runner = sql_app.test_cli_runner()
    runner.invoke(args=["seed", "run"])

    aborted = runner.invoke(args=["db-tools", "reset"], input="n\n")
    assert aborted.exit_code != 0
    assert len(get_services().categories.get_all()) == len(SEED_CATEGORIES)

    result = runner.invoke(args=["db-tools", "reset", "--yes"])
    assert result.exit_code == 0, result.output
    assert get_services().categories.get_all() == []


def test_report_today_prints_json(app):
    result = app.test_cli_runner().invoke(args=["report", "today"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"total_revenue": 0, "total_transaksi": 0, "produk_terlaris": None}


def test_report_range_rejects_bad_dates(app):
    runner = app.test_cli_runner()

    assert runner.invoke(args=["report", "range", "2024-01-31", "2024-01-01"]).exit_code != 0
    assert runner.invoke(args=["report", "range", "yesterday", "2024-01-01"]).exit_code != 0


def test_report_range_after_seed(sql_app):
    runner = sql_app.test_cli_runner()
    runner.invoke(args=["seed", "run", "--transactions", "3", "--seed", "1"])

    result = runner.invoke(args=["report", "range", "2000-01-01", "2100-12-31"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["total_transaksi"] == 3
