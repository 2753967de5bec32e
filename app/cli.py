import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp
from werkzeug.security import generate_password_hash

from models import db
from models.order import Order
from models.profile import AuthUser, Profile


def _assert_safe_for_upgrade():
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


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
    alembic_stamp(revision=revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("create-admin")
@click.option("--email", required=True)
@click.option("--password", required=True, prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--name", "full_name", default="Administrator")
@with_appcontext
def create_admin(email, password, full_name):
    """Create an admin account; admins cannot sign up through the API."""
    email = email.strip().lower()
    if AuthUser.query.filter_by(email=email).first():
        raise click.ClickException(f"{email} already exists")
    auth_user = AuthUser(email=email, password_hash=generate_password_hash(password))
    db.session.add(auth_user)
    db.session.flush()
    db.session.add(Profile(id=auth_user.id, email=email, full_name=full_name, role="admin"))
    db.session.commit()
    click.echo(f"Admin {email} created with id {auth_user.id}.")


@click.command("orders-needing-review")
@with_appcontext
def orders_needing_review():
    """List orders whose checkout rollback could not be completed."""
    orders = Order.query.filter_by(needs_review=True).order_by(Order.id.asc()).all()
    if not orders:
        click.echo("No orders need review.")
        return
    for o in orders:
        click.echo(f"#{o.id} buyer={o.buyer_id} seller={o.seller_id} status={o.status}: {o.review_reason}")


def register_cli(app):
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(create_admin)
    app.cli.add_command(orders_needing_review)
