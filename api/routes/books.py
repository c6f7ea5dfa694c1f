# api/routes/books.py

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from core.sa.database import get_db
from core.sa.models import Book, User
from core.services.book_service import BookService
from api.dependencies import get_current_user
from api.schemas.book import (
    Book as BookSchema, BookCreate, BookDeleted, BookDetailsUpdate, BookList, GenreList
)

router = APIRouter(prefix="/books", tags=["books"])

def _book_list(books: List[Book]) -> BookList:
    return BookList(items=[BookSchema.model_validate(book) for book in books], total=len(books))

@router.post("", response_model=BookSchema, status_code=status.HTTP_201_CREATED)
def create_book(
    body: BookCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return BookService(db).create_book(
        current_user,
        title=body.title,
        author=body.author,
        genre=body.genre,
        image_url=body.image_url
    )

@router.get("", response_model=BookList)
def get_owned_books(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Books owned by the caller, in every status"""
    return _book_list(BookService(db).list_owned(current_user))

@router.get("/available", response_model=BookList)
def get_available_books(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Books owned by other users that can be borrowed right now"""
    return _book_list(BookService(db).list_available(current_user))

@router.get("/lent", response_model=BookList)
def get_lent_books(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _book_list(BookService(db).list_lent(current_user))

@router.get("/borrowed", response_model=BookList)
def get_borrowed_books(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _book_list(BookService(db).list_borrowed(current_user))

@router.get("/owned/pending-approval", response_model=BookList)
def get_books_with_pending_requests(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Books owned by the caller that have requests waiting for a decision"""
    return _book_list(BookService(db).list_pending_approval(current_user))

@router.get("/genres", response_model=GenreList)
def get_genres(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    genres = BookService(db).list_genres()
    return GenreList(items=genres, total=len(genres))

@router.get("/genre/{genre}", response_model=BookList)
def get_books_by_genre(
    genre: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Available books from other users in a genre (case-insensitive)"""
    return _book_list(BookService(db).list_available(current_user, genre=genre))

@router.get("/{book_ref}", response_model=BookSchema)
def get_book(book_ref: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return BookService(db).get_book(book_ref)

@router.put("/{book_ref}/details", response_model=BookSchema)
def update_book_details(
    book_ref: str,
    body: BookDetailsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return BookService(db).update_details(book_ref, current_user, body.model_dump(exclude_unset=True))

@router.patch("/{book_ref}", response_model=BookSchema)
def patch_book(
    book_ref: str,
    body: BookDetailsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return BookService(db).update_details(book_ref, current_user, body.model_dump(exclude_unset=True))

@router.delete("/{book_ref}", response_model=BookDeleted)
def delete_book(book_ref: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    display_id = BookService(db).delete_book(book_ref, current_user)
    return BookDeleted(message="Book deleted successfully", display_id=display_id)

# Lending lifecycle

@router.post("/{book_ref}/request-borrow", response_model=BookSchema)
def request_borrow(book_ref: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return BookService(db).request_borrow(book_ref, current_user)

@router.post("/{book_ref}/withdraw-request", response_model=BookSchema)
def withdraw_request(book_ref: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return BookService(db).withdraw_request(book_ref, current_user)

@router.post("/{book_ref}/borrow", response_model=BookSchema)
def borrow_book(book_ref: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return BookService(db).borrow(book_ref, current_user)

@router.post("/{book_ref}/approve/{requesting_user_id}", response_model=BookSchema)
def approve_borrow_request(
    book_ref: str,
    requesting_user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return BookService(db).approve(book_ref, current_user, requesting_user_id)

@router.post("/{book_ref}/reject/{requesting_user_id}", response_model=BookSchema)
def reject_borrow_request(
    book_ref: str,
    requesting_user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return BookService(db).reject(book_ref, current_user, requesting_user_id)

@router.post("/{book_ref}/return", response_model=BookSchema)
def return_book(book_ref: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return BookService(db).return_book(book_ref, current_user)
