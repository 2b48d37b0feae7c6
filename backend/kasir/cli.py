# Overview: Flask CLI command groups for schema management, demo data and reports.

# backend/kasir/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Set USE_DATABASE=true for the commands that touch the SQL backend.
# - Use: python -m flask <group> <command> [options]
#
# Schema:
# - python -m flask db-tools init
#   Create any missing tables.
# - python -m flask db-tools reset --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Demo data:
# - python -m flask seed run [--transactions 10] [--clear]
#   Insert the sample minimarket catalogue, optionally with random checkouts
#   spread over the last 7 days.
#
# Reports:
# - python -m flask report today
# - python -m flask report range 2024-01-01 2024-01-31

import json
import random
from datetime import timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db, get_services
from .errors import KasirError
from .models import Category, CheckoutItem, Product, CategoryRow, ProductRow, TransactionDetailRow, TransactionRow
from .services import TransactionService
from .time_utils import now, parse_date


SEED_CATEGORIES = [
    ("Makanan", "Makanan instan, snack, dan cemilan"),
    ("Minuman", "Minuman kemasan dan botol"),
    ("Rokok", "Rokok dan produk tembakau"),
    ("Kebutuhan Rumah", "Sabun, deterjen, dan kebutuhan rumah tangga"),
    ("Alat Tulis", "Pulpen, buku, dan alat tulis kantor"),
]

# (name, price, stock, index into SEED_CATEGORIES)
SEED_PRODUCTS = [
    ("Indomie Goreng", 3500, 100, 0),
    ("Indomie Rebus", 3000, 80, 0),
    ("Mie Sedaap Goreng", 3500, 75, 0),
    ("Pop Mie Ayam", 6000, 50, 0),
    ("Chitato Original", 12000, 40, 0),
    ("Lays Classic", 13000, 35, 0),
    ("Oreo Original", 8500, 45, 0),
    ("Biskuit Roma Kelapa", 5000, 60, 0),
    ("Roti Tawar Sari Roti", 15000, 25, 0),
    ("Energen Coklat", 2500, 90, 0),
    ("Aqua 600ml", 4000, 120, 1),
    ("Aqua 1500ml", 7500, 60, 1),
    ("Teh Botol Sosro", 5000, 80, 1),
    ("Teh Pucuk Harum", 4500, 85, 1),
    ("Coca Cola 390ml", 7000, 50, 1),
    ("Fanta Strawberry 390ml", 7000, 45, 1),
    ("Sprite 390ml", 7000, 40, 1),
    ("Pocari Sweat 500ml", 8500, 55, 1),
    ("Kopi Good Day Cappucino", 4000, 70, 1),
    ("Ultra Milk Coklat 250ml", 6000, 65, 1),
    ("Gudang Garam Surya 16", 28000, 30, 2),
    ("Djarum Super 16", 26000, 35, 2),
    ("Sampoerna Mild 16", 32000, 40, 2),
    ("Marlboro Red 20", 38000, 25, 2),
    ("LA Lights 16", 24000, 45, 2),
    ("Rinso Cair 800ml", 18000, 30, 3),
    ("Sunlight Jeruk 755ml", 15000, 35, 3),
    ("Molto Pewangi 800ml", 16000, 28, 3),
    ("Baygon Aerosol 600ml", 45000, 20, 3),
    ("Tissue Paseo 250 sheets", 18000, 40, 3),
    ("Sabun Lifebuoy 85g", 4000, 60, 3),
    ("Shampo Pantene 170ml", 28000, 25, 3),
    ("Pasta Gigi Pepsodent 190g", 15000, 35, 3),
    ("Pulpen Standard AE7", 3000, 100, 4),
    ("Pensil 2B Faber Castell", 2500, 80, 4),
    ("Buku Tulis Sidu 58 lembar", 5000, 50, 4),
    ("Penghapus Steadler", 3500, 60, 4),
    ("Penggaris 30cm", 4000, 40, 4),
    ("Tip-X Kenko", 8000, 35, 4),
]


def _require_database():
    if not current_app.config.get("USE_DATABASE"):
        raise click.ClickException("USE_DATABASE is not enabled; the in-memory store does not outlive this command.")


@click.group('db-tools')
def db_tools_group():
    """Schema management for the SQL backend."""


@db_tools_group.command('init')
@with_appcontext
def init_db():
    """Create any missing tables."""
    _require_database()
    db.create_all()
    click.echo("PASS Tables created")


@db_tools_group.command('reset')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    _require_database()
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.session.remove()
    db.drop_all()
    click.echo("BUILD Creating all tables...")
    db.create_all()
    click.echo("PASS Database reset complete")


@click.group('seed')
def seed_group():
    """Sample data."""


@seed_group.command('run')
@click.option('--transactions', 'transaction_count', default=0, show_default=True,
              help='Number of random checkouts to create')
@click.option('--clear', is_flag=True, help='Delete existing data first')
@click.option('--seed', 'random_seed', type=int, default=None, help='Random seed for reproducible transactions')
@with_appcontext
def seed_run(transaction_count, clear, random_seed):
    """Insert sample categories, products and (optionally) transactions."""
    _require_database()
    services = get_services()

    if clear:
        for model in (TransactionDetailRow, TransactionRow, ProductRow, CategoryRow):
            db.session.query(model).delete()
        db.session.commit()
        click.echo("DELETE  Cleared existing data")

    category_ids = []
    for name, description in SEED_CATEGORIES:
        created = services.categories.create(Category(name=name, description=description))
        category_ids.append(created.id)
    click.echo(f"PASS Seeded {len(category_ids)} categories")

    product_ids = []
    for name, price, stock, category_index in SEED_PRODUCTS:
        created = services.products.create(Product(
            name=name,
            price=price,
            stock=stock,
            category_id=category_ids[category_index],
        ))
        product_ids.append(created.id)
    click.echo(f"PASS Seeded {len(product_ids)} products")

    if transaction_count > 0:
        created = _seed_transactions(services.transactions, product_ids, transaction_count, random_seed)
        click.echo(f"PASS Seeded {created} transactions")

    click.echo("DONE Seeding completed")


def _seed_transactions(transactions, product_ids, count, random_seed=None) -> int:
    rng = random.Random(random_seed)
    base = now()
    created = 0

    for _ in range(count):
        # Random moment within the last 7 days
        created_at = base - timedelta(hours=rng.randrange(7 * 24))
        checkout = TransactionService(
            transactions.repo,
            transactions.product_repo,
            atomic_stock=transactions.atomic_stock,
            clock=lambda created_at=created_at: created_at,
        )
        picked = rng.sample(product_ids, k=min(len(product_ids), rng.randint(1, 5)))
        items = [CheckoutItem(product_id=pid, quantity=rng.randint(1, 3)) for pid in picked]
        try:
            checkout.checkout(items)
        except KasirError as e:
            click.echo(f"WARN  Skipped checkout: {e}")
            continue
        created += 1
    return created


@click.group('report')
def report_group():
    """Sales reports."""


@report_group.command('today')
@with_appcontext
def report_today():
    """Print today's revenue, transaction count and best seller."""
    report = get_services().transactions.get_today_report()
    click.echo(json.dumps(report.to_dict(), indent=2))


@report_group.command('range')
@click.argument('start_date')
@click.argument('end_date')
@with_appcontext
def report_range(start_date, end_date):
    """Print the report for START_DATE..END_DATE (YYYY-MM-DD, both inclusive)."""
    try:
        start = parse_date(start_date)
        end = parse_date(end_date)
    except ValueError:
        raise click.BadParameter("dates must be YYYY-MM-DD") from None
    if start is None or end is None:
        raise click.BadParameter("dates must be YYYY-MM-DD")
    try:
        report = get_services().transactions.get_report_by_date_range(start, end)
    except KasirError as e:
        raise click.ClickException(str(e)) from None
    click.echo(json.dumps(report.to_dict(), indent=2))


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(db_tools_group)
    app.cli.add_command(seed_group)
    app.cli.add_command(report_group)
