import click
from typing import Optional
from core.exceptions import NotFound
from core.sa.models import BookStatus
from core.services.book_service import BookService
from core.sa.repositories.book import BookRepository

STATUS_COLORS = {
    BookStatus.AVAILABLE.value: 'green',
    BookStatus.PENDING_APPROVAL.value: 'yellow',
    BookStatus.LENT.value: 'cyan',
}

@click.group(name='books')
def book():
    """Book related commands"""
    pass

@book.command(name='list')
@click.option('--status', type=click.Choice([s.value for s in BookStatus]), default=None,
              help='Only show books in this status')
@click.option('--limit', default=None, type=int, help='Limit number of books to show')
@click.pass_obj
def list_books(obj, status: Optional[str], limit: Optional[int]):
    """List books with their lending status"""
    with obj['database'].get_db() as session:
        books = BookRepository(session).get_all(
            status=BookStatus(status) if status else None,
            limit=limit
        )
        for b in books:
            click.echo(
                f"{b.display_id}  "
                + click.style(f"{b.status:<16}", fg=STATUS_COLORS.get(b.status))
                + f"{b.title} by {b.author} (owner {b.owner.display_id})"
            )
        click.echo(f"\n{len(books)} books")

@book.command()
@click.argument('ref')
@click.pass_obj
def show(obj, ref: str):
    """Show one book by internal id or display id

    Example:
        book-lending books show BK-7F3K9Q
    """
    with obj['database'].get_db() as session:
        try:
            b = BookService(session).get_book(ref)
        except NotFound as e:
            raise click.ClickException(e.message)

        click.echo(f"{b.display_id} (id {b.id})")
        click.echo(f"  Title: {b.title}")
        click.echo(f"  Author: {b.author}")
        click.echo(f"  Genre: {b.genre}")
        click.echo(f"  Owner: {b.owner.username} ({b.owner.display_id})")
        click.echo("  Status: " + click.style(b.status, fg=STATUS_COLORS.get(b.status)))
        if b.borrower:
            click.echo(f"  Borrower: {b.borrower.username} ({b.borrower.display_id})")
        if b.requests:
            click.echo(f"  Pending: {', '.join(u.display_id for u in b.pending_requesters)}")
        click.echo(f"  Rating: {b.average_rating:.2f} from {b.total_reviews} reviews")

@book.command()
@click.pass_obj
def check(obj):
    """Report books whose status, borrower and requests disagree

    Exits with status 1 when any inconsistent book is found.
    """
    with obj['database'].get_db() as session:
        report = BookService(session).find_inconsistent()

    if not report:
        click.echo(click.style("All books are consistent", fg='green'))
        return

    for display_id, problems in report.items():
        click.echo(click.style(f"{display_id}: ", fg='red') + "; ".join(problems))
    raise click.exceptions.Exit(1)
