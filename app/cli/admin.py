"""
Admin user management.

    blog-admin create   # prompts for mail address and password
    blog-admin delete   # prompts for mail address
"""

import click

from app.core.config import get_settings
from app.core.errors import BlogError
from app.core.logging_config import configure_logging
from app.core.security import MAX_PASSWORD_BYTES
from app.db.database import create_tables, get_session_maker
from app.repositories.user import UserRepository
from app.services.user import UserService


def _open_session():
    create_tables()
    return get_session_maker()()


@click.group()
def cli():
    """Manage admin users of the blog"""
    configure_logging(get_settings())


@cli.command()
@click.option("--mail-address", prompt="mailAddress", help="Admin mail address")
@click.option(
    "--password",
    prompt=f"Password (shorter than {MAX_PASSWORD_BYTES} bytes)",
    hide_input=True,
    confirmation_prompt=True,
    help="Admin password",
)
def create(mail_address: str, password: str):
    """Create an admin user"""
    session = _open_session()
    try:
        UserService(UserRepository(session)).store_user(mail_address, password)
        session.commit()
    except BlogError as e:
        session.rollback()
        raise click.ClickException(str(e))
    finally:
        session.close()
    click.echo("admin user created successfully")


@cli.command()
@click.option("--mail-address", prompt="mailAddress", help="Admin mail address")
def delete(mail_address: str):
    """Delete an admin user"""
    session = _open_session()
    try:
        UserService(UserRepository(session)).delete_user_by_mail_address(mail_address)
        session.commit()
    except BlogError as e:
        session.rollback()
        raise click.ClickException(str(e))
    finally:
        session.close()
    click.echo("admin user deleted successfully")


if __name__ == "__main__":
    cli()
