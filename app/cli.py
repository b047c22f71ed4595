import os
import uuid
from decimal import Decimal

import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate
from werkzeug.security import generate_password_hash

from app.services.catalog import create_product
from models.user import UserProfile
from models import db

DEMO_PRODUCTS = [
    {"name": "Wireless Earbuds", "description": "Bluetooth 5.3, 24h battery", "price": Decimal("249000"), "stock": 25, "category": "electronics"},
    {"name": "Cotton Oversized Tee", "description": "Heavyweight cotton, unisex fit", "price": Decimal("89000"), "stock": 40, "category": "fashion"},
    {"name": "Arabica Coffee Beans 250g", "description": "Medium roast, single origin", "price": Decimal("75000"), "stock": 60, "category": "food"},
    {"name": "Clean Code Paperback", "description": "A handbook of agile craftsmanship", "price": Decimal("320000"), "stock": 10, "category": "books"},
]


def _assert_safe_for_upgrade():
    # Prevent accidental prod upgrades unless explicitly allowed
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("seed-catalog")
@click.option("--email", default="seller@example.com", help="Demo seller email")
@click.option("--password", default="password123", help="Demo seller password")
@with_appcontext
def seed_catalog(email, password):
    """Create a demo seller account with a few products."""
    if (os.getenv("APP_ENV") or "").lower() == "production":
        raise click.ClickException("Refusing to seed demo data in production")
    seller = UserProfile.query.filter_by(email=email).first()
    if not seller:
        seller = UserProfile(
            uid=uuid.uuid4().hex,
            email=email,
            password_hash=generate_password_hash(password),
            role="seller",
        )
        db.session.add(seller)
        db.session.commit()
    elif seller.role != "seller":
        raise click.ClickException(f"{email} is registered as {seller.role}")
    for data in DEMO_PRODUCTS:
        create_product(seller.uid, data)
    click.echo(f"Seeded {len(DEMO_PRODUCTS)} products for {email}.")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(seed_catalog)
