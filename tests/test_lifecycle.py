# tests/test_lifecycle.py
import pytest
from core import lifecycle
from core.exceptions import InvalidTransition, NotAuthorized
from core.sa.models import BookStatus
from core.services.book_service import BookService

@pytest.fixture
def service(db_session):
    return BookService(db_session)

def roster(book):
    return [u.username for u in book.pending_requesters]

def assert_consistent(book):
    assert lifecycle.check_invariants(book) == []

def test_request_to_borrow(service, sample_book, alice):
    book = service.request_borrow(sample_book.display_id, alice)
    assert book.status == BookStatus.PENDING_APPROVAL
    assert roster(book) == ["alice"]
    assert book.borrower_id is None
    assert_consistent(book)

def test_duplicate_request_keeps_user_once(service, sample_book, alice):
    service.request_borrow(sample_book.id, alice)
    with pytest.raises(InvalidTransition):
        service.request_borrow(sample_book.id, alice)
    assert roster(service.get_book(sample_book.id)) == ["alice"]

def test_owner_cannot_request_own_book(service, sample_book, owner):
    with pytest.raises(InvalidTransition):
        service.request_borrow(sample_book.id, owner)
    assert service.get_book(sample_book.id).status == BookStatus.AVAILABLE

def test_cannot_request_lent_book(service, sample_book, alice, carol):
    service.borrow(sample_book.id, alice)
    with pytest.raises(InvalidTransition) as exc_info:
        service.request_borrow(sample_book.id, carol)
    assert exc_info.value.status == BookStatus.LENT
    assert exc_info.value.action == lifecycle.REQUEST

def test_direct_borrow(service, sample_book, alice):
    book = service.borrow(sample_book.id, alice)
    assert book.status == BookStatus.LENT
    assert book.borrower_id == alice.id
    assert_consistent(book)

def test_direct_borrow_requires_available(service, sample_book, alice, carol):
    service.request_borrow(sample_book.id, alice)
    with pytest.raises(InvalidTransition):
        service.borrow(sample_book.id, carol)
    book = service.get_book(sample_book.id)
    assert book.status == BookStatus.PENDING_APPROVAL
    assert book.borrower_id is None

def test_owner_cannot_borrow_own_book(service, sample_book, owner):
    with pytest.raises(InvalidTransition):
        service.borrow(sample_book.id, owner)

def test_approve_only_by_owner(service, sample_book, alice, carol):
    service.request_borrow(sample_book.id, alice)
    with pytest.raises(NotAuthorized):
        service.approve(sample_book.id, carol, alice.id)
    book = service.get_book(sample_book.id)
    assert book.status == BookStatus.PENDING_APPROVAL
    assert roster(book) == ["alice"]

def test_approve_requires_requester_in_roster(service, sample_book, owner, alice, carol):
    service.request_borrow(sample_book.id, alice)
    with pytest.raises(InvalidTransition):
        service.approve(sample_book.id, owner, carol.id)

def test_approve_requires_pending(service, sample_book, owner, alice):
    with pytest.raises(InvalidTransition):
        service.approve(sample_book.id, owner, alice.id)

def test_no_decision_after_approve(service, sample_book, owner, alice, carol):
    """Once lent, further approve or reject calls fail"""
    service.request_borrow(sample_book.id, alice)
    service.request_borrow(sample_book.id, carol)
    service.approve(sample_book.id, owner, alice.id)

    with pytest.raises(InvalidTransition):
        service.approve(sample_book.id, owner, carol.id)
    with pytest.raises(InvalidTransition):
        service.reject(sample_book.id, owner, carol.id)
    book = service.get_book(sample_book.id)
    assert book.borrower_id == alice.id
    assert_consistent(book)

def test_reject_one_of_two(service, sample_book, owner, alice, carol):
    service.request_borrow(sample_book.id, alice)
    service.request_borrow(sample_book.id, carol)
    book = service.reject(sample_book.id, owner, alice.display_id)
    assert book.status == BookStatus.PENDING_APPROVAL
    assert roster(book) == ["carol"]
    assert_consistent(book)

def test_reject_sole_requester(service, sample_book, owner, alice):
    service.request_borrow(sample_book.id, alice)
    book = service.reject(sample_book.id, owner, alice.id)
    assert book.status == BookStatus.AVAILABLE
    assert roster(book) == []
    assert_consistent(book)

def test_reject_only_by_owner(service, sample_book, alice):
    service.request_borrow(sample_book.id, alice)
    with pytest.raises(NotAuthorized):
        service.reject(sample_book.id, alice, alice.id)

def test_withdraw_request(service, sample_book, alice, carol):
    service.request_borrow(sample_book.id, alice)
    service.request_borrow(sample_book.id, carol)

    book = service.withdraw_request(sample_book.id, carol)
    assert roster(book) == ["alice"]
    book = service.withdraw_request(sample_book.id, alice)
    assert book.status == BookStatus.AVAILABLE
    assert_consistent(book)

def test_withdraw_without_request(service, sample_book, alice, carol):
    service.request_borrow(sample_book.id, alice)
    with pytest.raises(InvalidTransition):
        service.withdraw_request(sample_book.id, carol)

def test_return_only_by_borrower(service, sample_book, owner, alice, carol):
    service.borrow(sample_book.id, alice)
    with pytest.raises(NotAuthorized):
        service.return_book(sample_book.id, carol)
    with pytest.raises(NotAuthorized):
        service.return_book(sample_book.id, owner)
    book = service.get_book(sample_book.id)
    assert book.status == BookStatus.LENT
    assert book.borrower_id == alice.id

def test_return_when_not_lent(service, sample_book, alice):
    with pytest.raises(NotAuthorized):
        service.return_book(sample_book.id, alice)

def test_lending_scenario(service, owner, alice, carol):
    """Create, two requests, approve the first, return"""
    book = service.create_book(owner, "A Wizard of Earthsea", "Ursula K. Le Guin", "Fantasy")
    assert book.status == BookStatus.AVAILABLE

    book = service.request_borrow(book.display_id, alice)
    assert book.status == BookStatus.PENDING_APPROVAL
    assert roster(book) == ["alice"]

    book = service.request_borrow(book.display_id, carol)
    assert roster(book) == ["alice", "carol"]

    book = service.approve(book.display_id, owner, alice.display_id)
    assert book.status == BookStatus.LENT
    assert book.borrower_id == alice.id
    assert roster(book) == []

    book = service.return_book(book.display_id, alice)
    assert book.status == BookStatus.AVAILABLE
    assert book.borrower_id is None
    assert_consistent(book)

def test_check_invariants_reports_corruption(db_session, service, sample_book, alice):
    sample_book.status = BookStatus.LENT.value
    db_session.commit()

    assert lifecycle.check_invariants(sample_book) == ["lent without a borrower"]
    assert service.find_inconsistent() == {sample_book.display_id: ["lent without a borrower"]}

def test_check_invariants_owner_as_borrower(db_session, sample_book, owner):
    sample_book.status = BookStatus.LENT.value
    sample_book.borrower_id = owner.id
    db_session.commit()
    assert lifecycle.check_invariants(sample_book) == ["owner is the borrower"]
