"""
Commands for creating the database and portal users. For dev/test purposes
only.

.. warning: DO NOT USE THIS ON A PRODUCTION DATABASE.

"""

import click

from . import domain
from .factory import create_web_app


@click.group()
def cli() -> None:
    """Manage council accounts."""


@cli.command('create-db')
def create_db() -> None:
    """Create the account tables."""
    app = create_web_app()
    app.config['council_accounts.AuthFlow'].store.create_all()
    click.echo('Created tables')


@cli.command('create-user')
@click.option('--username', prompt='Nombre de usuario')
@click.option('--password', prompt='Contraseña', hide_input=True,
              confirmation_prompt=True)
@click.option('--council', prompt='Consejo comunal',
              default=domain.DEFAULT_COUNCIL_NAME)
@click.option('--question', prompt='Pregunta de seguridad',
              type=click.Choice(domain.SECURITY_QUESTIONS),
              default=domain.DEFAULT_SECURITY_QUESTION)
@click.option('--answer', prompt='Respuesta de seguridad', hide_input=True)
def create_user(username: str, password: str, council: str, question: str,
                answer: str) -> None:
    """Create a new administrator. For dev/test purposes only."""
    app = create_web_app()
    flow = app.config['council_accounts.AuthFlow']
    flow.store.create_all()
    result = flow.sign_up(username, password, password, question, answer,
                          council_name=council)
    if not result.ok:
        for field, messages in result.errors.items():
            click.echo(f'{field}: {"; ".join(messages)}', err=True)
        raise click.ClickException(f'Could not create user: '
                                   f'{result.failure.value}')
    click.echo(f'Created user {result.value.user_id}')


if __name__ == '__main__':
    cli()
