# tests/test_sa/test_models.py
import pytest
from sqlalchemy.exc import IntegrityError
from core.sa.models import Book, BookRequest, BookStatus, Review

def test_new_book_defaults(sample_book, owner):
    """A created book starts available with empty aggregates"""
    assert sample_book.status == BookStatus.AVAILABLE
    assert sample_book.borrower_id is None
    assert sample_book.requests == []
    assert sample_book.average_rating == 0.0
    assert sample_book.total_reviews == 0
    assert sample_book.owner.id == owner.id
    assert sample_book.created_at is not None

def test_requests_keep_insertion_order(db_session, sample_book, alice, carol):
    """The roster is ordered by request row id"""
    db_session.add(BookRequest(book_id=sample_book.id, user_id=carol.id))
    db_session.add(BookRequest(book_id=sample_book.id, user_id=alice.id))
    db_session.commit()
    db_session.expire(sample_book)

    assert [u.username for u in sample_book.pending_requesters] == ["carol", "alice"]
    assert sample_book.pending_requester_ids == [carol.id, alice.id]

def test_request_unique_per_book_and_user(db_session, sample_book, alice):
    db_session.add(BookRequest(book_id=sample_book.id, user_id=alice.id))
    db_session.commit()
    db_session.add(BookRequest(book_id=sample_book.id, user_id=alice.id))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

def test_review_unique_per_book_and_user(db_session, sample_book, alice):
    db_session.add(Review(book_display_id=sample_book.display_id, user_id=alice.id, rating=4))
    db_session.commit()
    db_session.add(Review(book_display_id=sample_book.display_id, user_id=alice.id, rating=2))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

def test_review_rating_range_enforced(db_session, sample_book, alice):
    db_session.add(Review(book_display_id=sample_book.display_id, user_id=alice.id, rating=6))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()

def test_deleting_book_removes_requests_and_reviews(db_session, sample_book, alice):
    db_session.add(BookRequest(book_id=sample_book.id, user_id=alice.id))
    db_session.add(Review(book_display_id=sample_book.display_id, user_id=alice.id, rating=5))
    db_session.commit()
    db_session.expire(sample_book)

    db_session.delete(sample_book)
    db_session.commit()

    assert db_session.query(Book).count() == 0
    assert db_session.query(BookRequest).count() == 0
    assert db_session.query(Review).count() == 0
