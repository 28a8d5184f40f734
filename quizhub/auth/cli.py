"""
``flask create-user`` command.

Accounts are provisioned by operators; the API itself has no registration
endpoint.
"""
import click
from flask.cli import with_appcontext

from quizhub import db
from quizhub.auth.models import User, USER_TYPES
from quizhub.auth.utils import hash_password, is_valid_email


@click.command("create-user")
@click.argument("email")
@click.option("--name", "full_name", required=True, help="Full name of the user.")
@click.option("--role", "user_type", type=click.Choice(USER_TYPES), default="student", show_default=True)
@click.password_option()
@with_appcontext
def create_user_command(email, full_name, user_type, password):
    """Create an admin or student account."""
    email = email.strip().lower()
    if not is_valid_email(email):
        raise click.BadParameter("invalid email address", param_hint="EMAIL")
    if db.session.query(User).filter_by(email=email).first():
        raise click.ClickException(f"A user with email {email} already exists")

    user = User(
        email=email,
        full_name=full_name.strip(),
        user_type=user_type,
        password_hash=hash_password(password),
    )
    db.session.add(user)
    db.session.commit()
    click.echo(f"Created {user_type} {email} (id={user.id})")
