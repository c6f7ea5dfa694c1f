# cli/main.py
import logging
import click
from core.config import LOG_LEVEL
from core.sa.database import Database
from .commands.db import db
from .commands.book import book
from .commands.review import review
from .commands.user import user

@click.group()
@click.option('--database-url', envvar='DATABASE_URL', default=None,
              help='Database connection string (defaults to DATABASE_URL or local SQLite)')
@click.option('--verbose', is_flag=True, help='Log debug output')
@click.pass_context
def cli(ctx, database_url, verbose):
    """Book Lending CLI"""
    logging.basicConfig(level=logging.DEBUG if verbose else LOG_LEVEL)
    ctx.ensure_object(dict)
    ctx.obj['database'] = Database(database_url)

cli.add_command(db)
cli.add_command(book)
cli.add_command(review)
cli.add_command(user)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
