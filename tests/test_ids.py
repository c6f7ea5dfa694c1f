# tests/test_ids.py
import pytest
from core.exceptions import IdExhaustion
from core.utils.ids import ALPHABET, ID_LENGTH, IdGenerator, id_generator

def test_alphabet_has_no_lookalikes():
    """Ambiguous characters are never generated."""
    for c in "IO01":
        assert c not in ALPHABET
    assert len(set(ALPHABET)) == len(ALPHABET) == 32

def test_generate_format():
    """Ids are PREFIX-XXXXXX with an uppercase prefix."""
    value = id_generator.generate("bk")
    prefix, _, suffix = value.partition("-")
    assert prefix == "BK"
    assert len(suffix) == ID_LENGTH
    assert all(c in ALPHABET for c in suffix)
    assert id_generator.is_valid(value, "BK")

def test_is_valid_rejects_malformed():
    assert not id_generator.is_valid("BK-7F3K9", "BK")
    assert not id_generator.is_valid("BK-7F3K90", "BK")
    assert not id_generator.is_valid("USR-7F3K9Q", "BK")
    assert not id_generator.is_valid("BK7F3K9Q", "BK")

def test_create_unique_returns_first_free_candidate():
    """Taken candidates are skipped until one is free."""
    seen = []

    def exists(candidate):
        seen.append(candidate)
        return len(seen) < 3

    value = id_generator.create_unique("USR", exists, max_attempts=5)
    assert len(seen) == 3
    assert value == seen[-1]

def test_create_unique_gives_up_after_max_attempts():
    """A predicate that always says taken exhausts exactly max_attempts candidates."""
    calls = []

    def always_taken(candidate):
        calls.append(candidate)
        return True

    with pytest.raises(IdExhaustion) as exc_info:
        id_generator.create_unique("BK", always_taken, max_attempts=10)

    assert len(calls) == 10
    assert exc_info.value.attempts == 10
    assert exc_info.value.prefix == "BK"

def test_custom_generator():
    generator = IdGenerator(alphabet="AB", length=3)
    value = generator.generate("X")
    assert generator.is_valid(value, "X")
    assert set(value[2:]) <= {"A", "B"}
