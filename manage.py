#!/usr/bin/env python3
"""
LinePicks Management CLI

This script provides command-line management functionality for the LinePicks application.
"""

import logging
import os
from datetime import date

import click
from flask.cli import with_appcontext
from flask_migrate import downgrade, migrate, upgrade
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from linepicks import create_app, db
from linepicks.errors import DuplicateIdentity, NotFound
from linepicks.models import Pick, Season, User
from linepicks.services import CredentialStore, get_auth_service

app = create_app()


@click.group()
def cli():
    """LinePicks Management CLI"""
    pass


# Season Management Commands
@cli.group()
def season():
    """Season management commands"""
    pass


@season.command()
@click.argument("year", type=int)
@click.option(
    "--start-date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Season start date (YYYY-MM-DD)",
)
@click.option("--weeks", type=int, default=18, help="Regular season weeks")
@click.option("--playoff-weeks", type=int, default=4, help="Playoff weeks")
@click.option("--activate", is_flag=True, help="Activate this season")
@with_appcontext
def create(year, start_date, weeks, playoff_weeks, activate):
    """Create a new season"""
    try:
        if not start_date:
            start_date = date(year, 9, 1)  # September 1st
        else:
            start_date = start_date.date()

        existing = Season.query.filter_by(year=year).first()
        if existing:
            click.echo(f"Season {year} already exists!")
            return

        season = Season.create_season(year, start_date, weeks, playoff_weeks)

        if activate:
            db.session.flush()
            season.activate()

        db.session.commit()
        click.echo(f"✅ Created season {year} starting {start_date}")

        if activate:
            click.echo(f"✅ Activated season {year}")

    except IntegrityError as e:
        db.session.rollback()
        click.echo(f"❌ Season {year} already exists!")
        logging.error(f"Season creation failed - integrity error: {e}")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error creating season: {str(e)}")
        logging.error(f"Season creation failed - SQL error: {e}")


@season.command()
@click.argument("year", type=int)
@with_appcontext
def activate(year):
    """Activate a season"""
    try:
        season = Season.query.filter_by(year=year).first()
        if not season:
            click.echo(f"❌ Season {year} not found!")
            return

        season.activate()
        db.session.commit()
        click.echo(f"✅ Activated season {year}")

    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error activating season: {str(e)}")
        logging.error(f"Season activation failed - SQL error: {e}")


@season.command("set-week")
@click.argument("year", type=int)
@click.argument("week", type=int)
@with_appcontext
def set_week(year, week):
    """Pin the open week of a season (0 returns to date-based weeks)"""
    season = Season.query.filter_by(year=year).first()
    if not season:
        click.echo(f"❌ Season {year} not found!")
        return

    if week < 0 or week > season.total_weeks:
        click.echo(f"❌ Week must be between 0 and {season.total_weeks}")
        return

    season.current_week = week or None
    db.session.commit()
    click.echo(f"✅ Season {year} is now on week {season.get_current_week()}")


@season.command("list")
@with_appcontext
def list_seasons():
    """List all seasons"""
    seasons = Season.query.order_by(Season.year.desc()).all()

    if not seasons:
        click.echo("No seasons found.")
        return

    click.echo("Seasons:")
    for s in seasons:
        status = "🟢 ACTIVE" if s.is_active else "⚪ Inactive"
        click.echo(f"  {s.year}: {status} - Week {s.get_current_week()}")


# User Management Commands
@cli.group()
def user():
    """User management commands"""
    pass


@user.command("create")
@click.argument("email")
@click.argument("password")
@click.option("--display-name", help="Display name")
@with_appcontext
def create_user(email, password, display_name):
    """Create a user account"""
    try:
        account = get_auth_service().signup(email, password, display_name)
        click.echo(f"✅ Created user {account.email} (id {account.id})")
    except DuplicateIdentity:
        click.echo(f"❌ User with email '{email}' already exists!")
    except ValueError as e:
        click.echo(f"❌ {e}")


@user.command("list")
@with_appcontext
def list_users():
    """List all users"""
    users = User.query.order_by(User.created_at.desc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("Users:")
    for u in users:
        reset = " 🔑 reset pending" if u.has_pending_reset else ""
        click.echo(f"  {u.id}: {u.email} - {u.full_name}{reset}")


@user.command("reset-link")
@click.argument("email")
@with_appcontext
def reset_link(email):
    """Open a password reset for EMAIL and print the recovery link"""
    from flask import current_app

    from linepicks.utils.email_service import EmailService

    store = CredentialStore()
    try:
        account = store.find_by_identity(email)
    except NotFound:
        click.echo(f"❌ User '{email}' not found!")
        return

    token, expiry = current_app.extensions["reset_tokens"].generate()
    store.begin_reset(account.email, token, expiry)

    click.echo(f"✅ Reset link (valid until {expiry.isoformat()}):")
    click.echo(EmailService().build_reset_url(account.email, token))


# Database Commands
@cli.group()
def db_cmd():
    """Database commands"""
    pass


@db_cmd.command()
@with_appcontext
def init_db():
    """Initialize database tables"""
    try:
        db.create_all()
        click.echo("✅ Database tables created successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error initializing database: {str(e)}")


@db_cmd.command()
@with_appcontext
def reset():
    """⚠️  DANGER: Drop and recreate all tables"""
    if not click.confirm("This will DELETE ALL DATA. Are you sure?"):
        click.echo("Cancelled.")
        return

    try:
        db.drop_all()
        db.create_all()
        click.echo("✅ Database reset successfully!")
    except SQLAlchemyError as e:
        click.echo(f"❌ Error resetting database: {str(e)}")


# Database Migration Commands
@cli.group()
def db_migrate():
    """Database migration commands"""
    pass


@db_migrate.command()
@with_appcontext
def init_migrations():
    """Initialize migrations repository"""
    if os.path.exists("migrations"):
        click.echo("❌ Migrations directory already exists!")
        return

    from flask_migrate import init as flask_migrate_init

    flask_migrate_init()
    click.echo("✅ Migrations repository initialized!")


@db_migrate.command()
@click.option("-m", "--message", required=True, help="Migration message")
@with_appcontext
def create_migration(message):
    """Create a new migration"""
    migrate(message=message)
    click.echo(f"✅ Migration created: {message}")


@db_migrate.command()
@click.option("--revision", default="head", help="Revision to upgrade to")
@with_appcontext
def apply_migrations(revision):
    """Apply migrations to database"""
    upgrade(revision=revision)
    click.echo(f"✅ Migrations applied to {revision}")


@db_migrate.command()
@click.option("--revision", required=True, help="Revision to downgrade to")
@with_appcontext
def rollback_migration(revision):
    """Rollback migrations to specific revision"""
    downgrade(revision=revision)
    click.echo(f"✅ Rolled back to {revision}")


# Info Commands
@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("🏈 LinePicks Status")
    click.echo("=" * 40)

    try:
        db.session.execute(db.text("SELECT 1"))
        click.echo("✅ Database: Connected")
    except SQLAlchemyError as e:
        click.echo(f"❌ Database: Error - {str(e)}")
        return

    current = Season.get_current_season()
    if current:
        click.echo(f"📅 Active season: {current.year}, week {current.get_current_week()}")
    else:
        click.echo("⚠️  No active season")

    click.echo(f"👥 Users: {User.query.count()}")
    click.echo(f"🎯 Picks: {Pick.query.count()}")


if __name__ == "__main__":
    with app.app_context():
        cli()
