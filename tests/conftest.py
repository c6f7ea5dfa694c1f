# tests/conftest.py
import sys
import itertools
import pytest
from pathlib import Path

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy.orm import Session
from core.sa.database import Database
from core.sa.repositories.book import BookRepository
from core.sa.repositories.user import UserRepository

# Repository-level users skip real hashing; UserService tests hash properly
FAKE_HASH = "pbkdf2_sha256$1$salt$00"

@pytest.fixture
def database():
    """A fresh in-memory database per test"""
    db = Database("sqlite://")
    db.init_db()
    yield db
    db.drop_db()

@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def make_user(db_session):
    """Factory creating users with unique names"""
    counter = itertools.count(1)

    def _make(username=None):
        username = username or f"reader{next(counter)}"
        return UserRepository(db_session).create_user(
            username=username,
            email=f"{username}@example.com",
            password_hash=FAKE_HASH
        )
    return _make

@pytest.fixture
def owner(make_user):
    return make_user("owner")

@pytest.fixture
def alice(make_user):
    return make_user("alice")

@pytest.fixture
def carol(make_user):
    return make_user("carol")

@pytest.fixture
def sample_book(db_session, owner):
    """An available book owned by ``owner``"""
    return BookRepository(db_session).create_book(
        owner_id=owner.id,
        title="The Left Hand of Darkness",
        author="Ursula K. Le Guin",
        genre="Science Fiction"
    )
