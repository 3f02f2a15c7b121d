import click
from flask import current_app
from sqlalchemy.exc import IntegrityError

from .extensions import db
from .models.user import User


def register_cli(app):
    @app.cli.command("create-db")
    def create_db():
        """Create all tables (use `flask db upgrade` once migrations exist)."""
        db.create_all()
        click.echo("Tables created")

    @app.cli.command("create-admin")
    @click.option("--email", required=True)
    @click.option("--name", default="Administrador", show_default=True)
    @click.option("--password", default=None, help="Password for a new account; ignored when promoting.")
    def create_admin(email, name, password):
        """Create an administrator account, or promote an existing user.

        Promoting keeps the user's current password. A new account prompts
        for one when --password is not given.
        """
        email = email.lower().strip()
        user = User.query.filter_by(email=email).first()
        if user:
            user.role = User.ROLE_ADMIN
            action = "promoted"
        else:
            if not password:
                password = click.prompt("Password", hide_input=True, confirmation_prompt=True)
            user = User(email=email, name=name, role=User.ROLE_ADMIN)
            user.set_password(password)
            db.session.add(user)
            action = "created"

        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise click.ClickException(f"Could not save admin {email}") from e

        current_app.logger.info("Admin %s %s", email, action)
        click.echo(f"Admin {email} {action}")
