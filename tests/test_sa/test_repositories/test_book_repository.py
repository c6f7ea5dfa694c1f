# tests/test_sa/test_repositories/test_book_repository.py

import pytest
from core.exceptions import IdExhaustion
from core.sa.models import BookRequest, BookStatus
from core.sa.repositories.book import BookRepository
from core.utils.ids import id_generator

@pytest.fixture
def book_repo(db_session):
    """Fixture to create a BookRepository instance."""
    return BookRepository(db_session)

@pytest.fixture
def shelf(book_repo, owner, alice):
    """Books in each status, spread over two owners"""
    available = book_repo.create_book(owner.id, "Kindred", "Octavia E. Butler", "Science Fiction")
    pending = book_repo.create_book(owner.id, "Beloved", "Toni Morrison", "Literary Fiction")
    lent = book_repo.create_book(owner.id, "Piranesi", "Susanna Clarke", "Fantasy")
    alices = book_repo.create_book(alice.id, "Emma", "Jane Austen", "Classics")

    pending.requests.append(BookRequest(user_id=alice.id))
    pending.status = BookStatus.PENDING_APPROVAL.value
    lent.borrower_id = alice.id
    lent.status = BookStatus.LENT.value
    book_repo.session.commit()
    return {"available": available, "pending": pending, "lent": lent, "alices": alices}

def test_create_book(book_repo, owner):
    book = book_repo.create_book(owner.id, "Dune", "Frank Herbert", "Science Fiction")
    assert book.id is not None
    assert book.status == BookStatus.AVAILABLE
    assert id_generator.is_valid(book.display_id, "BK")

def test_display_ids_are_unique(book_repo, owner):
    ids = {book_repo.create_book(owner.id, f"Book {i}", "Author", "Genre").display_id for i in range(20)}
    assert len(ids) == 20

def test_get_owned_with_status(book_repo, owner, shelf):
    assert [b.title for b in book_repo.get_owned(owner.id)] == ["Kindred", "Beloved", "Piranesi"]
    assert [b.title for b in book_repo.get_owned(owner.id, status=BookStatus.LENT)] == ["Piranesi"]
    assert [b.title for b in book_repo.get_owned(owner.id, status=BookStatus.PENDING_APPROVAL)] == ["Beloved"]

def test_get_available_excludes_own_and_unavailable(book_repo, owner, alice, carol, shelf):
    assert [b.title for b in book_repo.get_available_for(carol.id)] == ["Kindred", "Emma"]
    assert [b.title for b in book_repo.get_available_for(alice.id)] == ["Kindred"]
    assert [b.title for b in book_repo.get_available_for(owner.id)] == ["Emma"]

def test_get_available_by_genre_is_case_insensitive(book_repo, carol, shelf):
    assert [b.title for b in book_repo.get_available_for(carol.id, genre="science fiction")] == ["Kindred"]
    assert book_repo.get_available_for(carol.id, genre="Fantasy") == []

def test_get_borrowed_and_requested(book_repo, alice, shelf):
    assert [b.title for b in book_repo.get_borrowed_by(alice.id)] == ["Piranesi"]
    assert [b.title for b in book_repo.get_requested_by(alice.id)] == ["Beloved"]

def test_get_genres(book_repo, shelf):
    assert book_repo.get_genres() == ["Classics", "Fantasy", "Literary Fiction", "Science Fiction"]

def test_get_all_and_count(book_repo, shelf):
    assert book_repo.count_books() == 4
    assert len(book_repo.get_all(limit=2)) == 2
    assert [b.title for b in book_repo.get_all(offset=3)] == ["Emma"]

def test_get_all_filters_status_before_limit(book_repo, shelf):
    assert [b.title for b in book_repo.get_all(status=BookStatus.LENT, limit=1)] == ["Piranesi"]
    assert [b.title for b in book_repo.get_all(status=BookStatus.AVAILABLE)] == ["Kindred", "Emma"]

def test_create_retries_when_display_id_is_taken_on_insert(book_repo, owner, sample_book, monkeypatch):
    """The unique constraint decides; a lost race regenerates the id."""
    candidates = iter([sample_book.display_id, "BK-RETRY2"])
    monkeypatch.setattr(id_generator, "generate", lambda prefix: next(candidates))
    monkeypatch.setattr(book_repo, "display_id_exists", lambda display_id: False)

    book = book_repo.create_book(owner.id, "Dune", "Frank Herbert", "Science Fiction")
    assert book.display_id == "BK-RETRY2"
    assert book_repo.count_books() == 2

def test_create_gives_up_when_every_insert_collides(book_repo, owner, sample_book, monkeypatch):
    taken = sample_book.display_id
    monkeypatch.setattr(id_generator, "generate", lambda prefix: taken)
    monkeypatch.setattr(book_repo, "display_id_exists", lambda display_id: False)

    with pytest.raises(IdExhaustion):
        book_repo.create_book(owner.id, "Dune", "Frank Herbert", "Science Fiction")
    assert book_repo.count_books() == 1
