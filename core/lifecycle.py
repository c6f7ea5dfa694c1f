# core/lifecycle.py
"""Book lending state machine.

A book is always in exactly one of three states::

    available --request--> pending_approval --approve--> lent --return--> available
    available --borrow-------------------------------->  lent
    pending_approval --reject/withdraw (roster empty)--> available

Each transition checks the caller's relationship to the book first
(``core.access``), then its own preconditions, and only then mutates the row.
Nothing here commits; callers own the unit of work.
"""
import logging
from typing import List, Optional

from core.access import ensure_owner, ensure_borrower
from core.exceptions import InvalidTransition
from core.sa.models import Book, BookRequest, BookStatus, User

logger = logging.getLogger(__name__)

REQUEST = "request-to-borrow"
BORROW = "borrow"
APPROVE = "approve"
REJECT = "reject"
RETURN = "return"
WITHDRAW = "withdraw-request"


def _find_request(book: Book, user: User) -> Optional[BookRequest]:
    return next((r for r in book.requests if r.user_id == user.id), None)


def _fail(book: Book, action: str, reason: Optional[str] = None):
    raise InvalidTransition(book.status, action, reason)


def request_to_borrow(book: Book, caller: User) -> Book:
    """Add the caller to the roster of users waiting to borrow the book"""
    if book.owner_id == caller.id:
        _fail(book, REQUEST, "you cannot request to borrow your own book")
    if book.status not in (BookStatus.AVAILABLE, BookStatus.PENDING_APPROVAL):
        _fail(book, REQUEST)
    if _find_request(book, caller) is not None:
        _fail(book, REQUEST, "you have already requested this book")

    book.requests.append(BookRequest(user=caller, user_id=caller.id))
    book.status = BookStatus.PENDING_APPROVAL.value
    logger.info(f"{caller.display_id} requested {book.display_id} ({len(book.requests)} pending)")
    return book


def direct_borrow(book: Book, caller: User) -> Book:
    """Borrow an available book without going through approval"""
    if book.owner_id == caller.id:
        _fail(book, BORROW, "you cannot borrow your own book")
    if book.status != BookStatus.AVAILABLE:
        _fail(book, BORROW)

    book.borrower = caller
    book.borrower_id = caller.id
    book.status = BookStatus.LENT.value
    logger.info(f"{caller.display_id} borrowed {book.display_id}")
    return book


def approve(book: Book, caller: User, requester: User) -> Book:
    """Lend the book to one of the pending requesters and clear the roster"""
    ensure_owner(book, caller, "approve borrow requests")
    if book.status != BookStatus.PENDING_APPROVAL:
        _fail(book, APPROVE)
    if _find_request(book, requester) is None:
        _fail(book, APPROVE, f"{requester.display_id} has not requested this book")

    book.requests.clear()
    book.borrower = requester
    book.borrower_id = requester.id
    book.status = BookStatus.LENT.value
    logger.info(f"{caller.display_id} lent {book.display_id} to {requester.display_id}")
    return book


def _drop_request(book: Book, request: BookRequest) -> None:
    book.requests.remove(request)
    if not book.requests:
        book.status = BookStatus.AVAILABLE.value


def reject(book: Book, caller: User, requester: User) -> Book:
    """Remove one requester; the book becomes available when nobody is left"""
    ensure_owner(book, caller, "reject borrow requests")
    if book.status != BookStatus.PENDING_APPROVAL:
        _fail(book, REJECT)
    request = _find_request(book, requester)
    if request is None:
        _fail(book, REJECT, f"{requester.display_id} has not requested this book")

    _drop_request(book, request)
    logger.info(f"{caller.display_id} rejected {requester.display_id} for {book.display_id}")
    return book


def withdraw_request(book: Book, caller: User) -> Book:
    """Let a requester take their own request back"""
    if book.status != BookStatus.PENDING_APPROVAL:
        _fail(book, WITHDRAW)
    request = _find_request(book, caller)
    if request is None:
        _fail(book, WITHDRAW, "you have no pending request for this book")

    _drop_request(book, request)
    logger.info(f"{caller.display_id} withdrew request for {book.display_id}")
    return book


def return_book(book: Book, caller: User) -> Book:
    ensure_borrower(book, caller)
    if book.status != BookStatus.LENT:
        _fail(book, RETURN)

    book.borrower = None
    book.borrower_id = None
    book.status = BookStatus.AVAILABLE.value
    logger.info(f"{caller.display_id} returned {book.display_id}")
    return book


def check_invariants(book: Book) -> List[str]:
    """List every status invariant the book currently violates.

    An empty list means the book is consistent.
    """
    problems = []
    has_borrower = book.borrower_id is not None
    roster = book.pending_requester_ids

    if book.status == BookStatus.LENT:
        if not has_borrower:
            problems.append("lent without a borrower")
        if roster:
            problems.append("lent with pending requests")
    elif book.status == BookStatus.PENDING_APPROVAL:
        if not roster:
            problems.append("pending approval with no requests")
        if has_borrower:
            problems.append("pending approval with a borrower")
    elif book.status == BookStatus.AVAILABLE:
        if has_borrower:
            problems.append("available with a borrower")
        if roster:
            problems.append("available with pending requests")
    else:
        problems.append(f"unknown status {book.status!r}")

    if has_borrower and book.borrower_id == book.owner_id:
        problems.append("owner is the borrower")
    if book.owner_id in roster:
        problems.append("owner is in the pending roster")
    if len(set(roster)) != len(roster):
        problems.append("duplicate pending requesters")
    return problems
