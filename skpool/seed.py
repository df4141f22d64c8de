"""
Command for initializing the pool in the key-value store.

Run once per deployment, before the service takes traffic::

    skpool-seed --path initial-sk-map.json

The file holds a JSON object of email to SK. Without ``--path`` the pool is
initialized empty.
"""

import json
from typing import Optional

import click

from .exceptions import PoolError
from .factory import create_web_app
from .pool import current_repository


@click.command()
@click.option('--path', type=click.Path(exists=True, dir_okay=False),
              default=None, help='JSON file mapping email to SK.')
@click.option('--force', is_flag=True, default=False,
              help='Overwrite a pool that already has entries.')
def seed(path: Optional[str], force: bool) -> None:
    """Write the initial email to SK map to the store."""
    data: object = {}
    if path:
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except ValueError as e:
            raise click.ClickException(f'{path} is not valid JSON: {e}')

    app = create_web_app()
    with app.app_context():
        repository = current_repository()
        try:
            existing = repository.snapshot()
            if existing and not force:
                raise click.ClickException(
                    f'The pool already has {len(existing)} entries; '
                    'use --force to overwrite it'
                )
            pool = repository.replace(data)
        except PoolError as e:
            raise click.ClickException(str(e))
        key = app.config['POOL_KEY']
    click.echo(f'Wrote {len(pool)} entries to {key}')


if __name__ == '__main__':
    seed()
