from datetime import timezone

import pytest
from sqlalchemy.exc import IntegrityError

from src.pastenote.core.models.note import Note


def test_flags():
    assert Note(id="a", text="", password="").is_deleted
    assert not Note(id="a", text="x", password="").is_protected
    assert Note(id="a", text="x", password="pw").is_protected


def test_repr():
    assert "abc" in repr(Note(id="abc", text="hi", views=3))


@pytest.mark.asyncio
async def test_defaults_and_to_dict(test_session):
    note = Note(id="defaults")
    test_session.add(note)
    await test_session.commit()

    assert note.text == ""
    assert note.password == ""
    assert note.views == 0
    assert note.created_at.tzinfo is timezone.utc

    data = note.to_dict()
    assert data["id"] == "defaults"
    assert isinstance(data["created_at"], str)


@pytest.mark.asyncio
async def test_views_cannot_go_negative(test_session):
    test_session.add(Note(id="negative", text="x", views=-1))
    with pytest.raises(IntegrityError):
        await test_session.commit()
