import click
from core.sa.repositories.user import UserRepository

@click.group(name='users')
def user():
    """User related commands"""
    pass

@user.command(name='list')
@click.option('--query', default="", help='Filter by username')
@click.option('--limit', default=20, type=int, help='Maximum number of users to show')
@click.pass_obj
def list_users(obj, query: str, limit: int):
    """List registered users"""
    with obj['database'].get_db() as session:
        repo = UserRepository(session)
        users = repo.search_users(query, limit=limit)
        for u in users:
            click.echo(f"{u.display_id}  {u.username:<20} {u.email}")
        click.echo(f"\nShowing {len(users)} of {repo.count_users()} users")
