# Overview: Flask CLI command groups for bootstrap, reports, and maintenance.

# backend/lottodesk/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init
#   Idempotent: creates tables and the default admin and staff users.
#
# Users:
# - python -m flask users create --username sam --password "Password123!" --role STAFF
#   Create a user (prompts if options are omitted).
# - python -m flask users list
#
# Reports:
# - python -m flask reports daily --date 2025-01-31
#   Print the daily summary and the cash pickup sheet in dollars.
#
# Continuity:
# - python -m flask continuity recheck --date 2025-01-31
#   Re-run the ticket continuity check for every box with an entry that day.

import click
from flask.cli import with_appcontext

from .errors import LottoDeskError
from .extensions import db
from .models import DailyBoxEntry, User
from .models.auth import ROLE_ADMIN, ROLE_STAFF, ROLES
from .services import continuity_service, summary_service
from .services.auth_service import create_user, PasswordValidationError
from .validation import cents_to_str, parse_business_date


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create all tables and the default users.

    Users: admin (ADMIN) and staff (STAFF), password "Password123!".

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing LottoDesk...")

    db.create_all()
    click.echo("PASS Tables ready")

    default_password = "Password123!"
    default_users = [
        ("admin", ROLE_ADMIN),
        ("staff", ROLE_STAFF),
    ]

    for username, role in default_users:
        if db.session.query(User).filter_by(username=username).first():
            click.echo(f"WARN  User '{username}' already exists, skipping...")
            continue
        create_user(username=username, password=default_password, role=role)
        click.echo(f"PASS Created user: {username} with role '{role}'")

    click.echo("\nDefault Credentials (CHANGE IN PRODUCTION!):")
    click.echo("   admin -> Password123!")
    click.echo("   staff -> Password123!")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(ROLES, case_sensitive=False), default=ROLE_STAFF, show_default=True)
@with_appcontext
def create_user_cli(username, password, role):
    """Create a new user. Password must be at least 8 characters."""
    try:
        user = create_user(username=username, password=password, role=role)
    except PasswordValidationError as e:
        raise click.ClickException(f"Password validation failed: {e}")
    except LottoDeskError as e:
        raise click.ClickException(f"Failed to create user: {e}")

    click.echo(f"PASS Created user: {user.username} (ID: {user.id}) with role '{user.role}'")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = db.session.query(User).order_by(User.id).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "=" * 60)
    click.echo(f"{'ID':<5} {'Username':<20} {'Role':<8} {'Active'}")
    click.echo("=" * 60)
    for user in users:
        click.echo(f"{user.id:<5} {user.username:<20} {user.role:<8} {'Yes' if user.is_active else 'No'}")
    click.echo("=" * 60 + "\n")


@click.group('reports')
def reports_group():
    """Revenue reports."""


def _parse_date_option(value: str):
    try:
        return parse_business_date(value)
    except LottoDeskError as e:
        raise click.BadParameter(str(e))


@reports_group.command('daily')
@click.option('--date', 'day', required=True, help='Business date (YYYY-MM-DD)')
@with_appcontext
def daily_report(day):
    """Print the daily summary and the generated cash pickup sheet."""
    business_date = _parse_date_option(day)

    summary = summary_service.compute_daily_summary(business_date).to_dict()
    sheet = summary_service.compute_generated_report_fields(business_date).to_dict()

    click.echo(f"\nDaily summary for {summary.pop('date')}")
    click.echo("-" * 50)
    for key, cents in summary.items():
        click.echo(f"  {key.removesuffix('_cents'):<40} {cents_to_str(cents) or '-':>10}")

    click.echo(f"\nCash pickup sheet for {sheet.pop('date')}")
    click.echo("-" * 50)
    for key, cents in sheet.items():
        click.echo(f"  {key.removesuffix('_cents'):<40} {cents_to_str(cents) or '-':>10}")


@click.group('continuity')
def continuity_group():
    """Ticket continuity maintenance."""


@continuity_group.command('recheck')
@click.option('--date', 'day', required=True, help='Business date (YYYY-MM-DD)')
@with_appcontext
def recheck_continuity(day):
    """Re-run the continuity check for every box with an entry on the date."""
    business_date = _parse_date_option(day)

    box_ids = [
        box_id for (box_id,) in db.session.query(DailyBoxEntry.box_id).filter(
            DailyBoxEntry.date == business_date,
        ).all()
    ]
    if not box_ids:
        click.echo(f"No entries for {business_date.isoformat()}.")
        return

    logs = continuity_service.run_continuity_check(business_date, box_ids)
    click.echo(f"PASS Checked {len(box_ids)} boxes, {len(logs)} new mismatch log(s)")
    for log in logs:
        click.echo(f"  {log.date.isoformat()} box {log.box_id}: {log.severity} (difference {log.difference})")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(reports_group)
    app.cli.add_command(continuity_group)
