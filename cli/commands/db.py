import click
from core.sa.migrations import upgrade_database, downgrade_database

@click.group()
def db():
    """Database setup commands"""
    pass

@db.command()
@click.pass_obj
def init(obj):
    """Create all tables directly from the models"""
    database = obj['database']
    database.init_db()
    click.echo(click.style(f"Initialized {database.engine.url}", fg='green'))

@db.command()
@click.option('--revision', default='head', help='Target Alembic revision')
@click.pass_obj
def upgrade(obj, revision: str):
    """Run Alembic migrations up to a revision

    Example:
        book-lending db upgrade
        book-lending db upgrade --revision 4f2b1c9d7e10
    """
    database = obj['database']
    upgrade_database(database.connection_string, revision)
    click.echo(click.style(f"Upgraded {database.engine.url} to {revision}", fg='green'))

@db.command()
@click.argument('revision')
@click.pass_obj
def downgrade(obj, revision: str):
    """Roll migrations back to a revision ('base' drops everything)"""
    database = obj['database']
    downgrade_database(database.connection_string, revision)
    click.echo(click.style(f"Downgraded {database.engine.url} to {revision}", fg='yellow'))
