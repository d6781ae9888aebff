"""
Flask CLI commands for scheduled maintenance and first-time setup
"""
import click
from flask.cli import AppGroup, with_appcontext
from salonbook import db
from salonbook.models.user import User, ROLE_SUPERADMIN
from salonbook.services.appointments import auto_complete_past, reset_future_completed

appointments_cli = AppGroup('appointments', help='Appointment maintenance tasks.')


@appointments_cli.command('auto-complete')
def auto_complete_command():
    """Mark scheduled appointments whose time has passed as completed."""
    completed = auto_complete_past()
    click.echo(f'{len(completed)} appointment(s) completed.')


@appointments_cli.command('reset-future-completed')
def reset_future_completed_command():
    """Schedule again future appointments that were marked completed."""
    reset = reset_future_completed()
    click.echo(f'{len(reset)} appointment(s) scheduled again.')


@click.command('create-superadmin')
@click.argument('email')
@click.argument('password')
@click.option('--name', default=None, help='Display name of the administrator.')
@with_appcontext
def create_superadmin_command(email, password, name):
    """Create a platform administrator account."""
    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        raise click.ClickException(f'A user with email {email} already exists.')

    user = User(email=email, password=password, role=ROLE_SUPERADMIN, name=name)
    db.session.add(user)
    db.session.commit()
    click.echo(f'Superadmin {email} created.')


def register_commands(app):
    app.cli.add_command(appointments_cli)
    app.cli.add_command(create_superadmin_command)
