import click
from typing import Optional
from core.exceptions import NotFound
from core.services.review_service import ReviewService

@click.group(name='reviews')
def review():
    """Review and rating commands"""
    pass

@review.command()
@click.argument('ref', required=False)
@click.option('--all', 'all_books', is_flag=True, help='Recompute every book')
@click.pass_obj
def recompute(obj, ref: Optional[str], all_books: bool):
    """Recompute rating aggregates from the stored reviews

    Safe to run repeatedly; it repairs books whose average rating or review
    count no longer match their reviews.

    Example:
        book-lending reviews recompute BK-7F3K9Q
        book-lending reviews recompute --all
    """
    if not ref and not all_books:
        raise click.UsageError("Pass a book id or --all")

    with obj['database'].get_db() as session:
        service = ReviewService(session)
        if all_books:
            repaired = service.recompute_all()
            click.echo(click.style(f"Repaired {len(repaired)} books", fg='green'))
            for display_id in repaired:
                click.echo(f"  {display_id}")
            return

        try:
            book = service.recompute_book_aggregates(ref)
        except NotFound as e:
            raise click.ClickException(e.message)
        click.echo(
            f"{book.display_id}: average {book.average_rating:.2f} "
            f"from {book.total_reviews} reviews"
        )
