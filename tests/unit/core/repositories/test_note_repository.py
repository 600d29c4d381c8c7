"""Note repository tests against SQLite in-memory."""

import pytest
from sqlalchemy import select

from src.pastenote.core.exceptions import (
    NoteBadRequestError,
    NoteConflictError,
    NoteNotFoundError,
    NoteUnauthorizedError,
    ServiceUnavailableError,
)
from src.pastenote.core.models.note import Note
from src.pastenote.core.repositories import note_repository
from src.pastenote.core.repositories.note_repository import NoteRepository
from src.pastenote.core.validation import NOTE_ID_ALPHABET, NOTE_ID_LENGTH

TEXT = "some note text that is long enough"


async def _stored(session_factory, note_id):
    async with session_factory() as session:
        result = await session.execute(select(Note).where(Note.id == note_id))
        return result.scalar_one_or_none()


@pytest.mark.asyncio
async def test_create_generates_id_and_round_trips(test_session):
    repo = NoteRepository(test_session)
    note = await repo.create(TEXT, "secret")

    assert len(note.id) == NOTE_ID_LENGTH
    assert set(note.id) <= set(NOTE_ID_ALPHABET)
    assert note.views == 0
    assert note.created_at == note.updated_at

    fetched = await repo.fetch(note.id)
    assert fetched.text == TEXT
    assert fetched.password == "secret"
    assert fetched.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_create_with_custom_id(test_session):
    repo = NoteRepository(test_session)
    note = await repo.create(TEXT, note_id="my-first_note")
    assert note.id == "my-first_note"


@pytest.mark.asyncio
async def test_create_custom_id_conflict(test_session, make_note):
    await make_note("taken-id")
    repo = NoteRepository(test_session)
    with pytest.raises(NoteConflictError) as exc:
        await repo.create(TEXT, note_id="taken-id")
    assert exc.value.status_code == 409


@pytest.mark.asyncio
async def test_deleted_id_is_not_reused(test_session, make_note):
    await make_note("gone-id", text="")
    repo = NoteRepository(test_session)
    with pytest.raises(NoteConflictError):
        await repo.create(TEXT, note_id="gone-id")


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_id", ["ab", "has space", "semi;colon", "x" * 65, "api", "TOS"])
async def test_create_rejects_bad_custom_ids(test_session, bad_id):
    repo = NoteRepository(test_session)
    with pytest.raises(NoteBadRequestError):
        await repo.create(TEXT, note_id=bad_id)


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["too short", "x" * 50001])
async def test_create_rejects_bad_length(test_session, text):
    repo = NoteRepository(test_session)
    with pytest.raises(NoteBadRequestError):
        await repo.create(text)


@pytest.mark.asyncio
async def test_create_accepts_length_bounds(test_session):
    repo = NoteRepository(test_session)
    short = await repo.create("x" * 10)
    long = await repo.create("y" * 50000)
    assert (await repo.fetch(short.id)).text == "x" * 10
    assert len((await repo.fetch(long.id)).text) == 50000


@pytest.mark.asyncio
async def test_generated_id_collision_is_retried(test_session, make_note, monkeypatch):
    await make_note("dupdup00")
    candidates = iter(["dupdup00", "fresh001"])
    monkeypatch.setattr(note_repository, "generate_note_id", lambda: next(candidates))

    note = await NoteRepository(test_session).create(TEXT)
    assert note.id == "fresh001"


@pytest.mark.asyncio
async def test_generated_id_gives_up(test_session, make_note, monkeypatch):
    await make_note("dupdup00")
    monkeypatch.setattr(note_repository, "generate_note_id", lambda: "dupdup00")

    with pytest.raises(ServiceUnavailableError):
        await NoteRepository(test_session).create(TEXT)


@pytest.mark.asyncio
async def test_fetch_missing_and_deleted(test_session, make_note):
    await make_note("deadnote", text="")
    repo = NoteRepository(test_session)

    with pytest.raises(NoteNotFoundError):
        await repo.fetch("nope0000")
    with pytest.raises(NoteNotFoundError):
        await repo.fetch("deadnote")


@pytest.mark.asyncio
async def test_update_with_password(test_session, make_note):
    await make_note("locked01", text=TEXT, password="hunter2")
    repo = NoteRepository(test_session)

    with pytest.raises(NoteUnauthorizedError):
        await repo.update("locked01", "wrong", "replacement text here")
    with pytest.raises(NoteUnauthorizedError):
        await repo.update("locked01", "", "replacement text here")
    assert (await repo.fetch("locked01")).text == TEXT

    updated = await repo.update("locked01", "hunter2", "replacement text here")
    assert updated.text == "replacement text here"
    assert updated.updated_at >= updated.created_at
    assert (await repo.fetch("locked01")).text == "replacement text here"


@pytest.mark.asyncio
async def test_update_unprotected_note_needs_no_password(test_session, make_note):
    await make_note("open0001", text=TEXT, password="")
    repo = NoteRepository(test_session)

    updated = await repo.update("open0001", "anything", "edited by someone else")
    assert updated.text == "edited by someone else"


@pytest.mark.asyncio
async def test_update_missing_note(test_session):
    with pytest.raises(NoteNotFoundError):
        await NoteRepository(test_session).update("nope0000", "", "replacement text here")


@pytest.mark.asyncio
async def test_update_rejects_bad_length(test_session, make_note):
    await make_note("open0002", text=TEXT)
    with pytest.raises(NoteBadRequestError):
        await NoteRepository(test_session).update("open0002", "", "short")


@pytest.mark.asyncio
async def test_update_with_empty_text_deletes(test_session, make_note, session_factory):
    await make_note("bye00001", text=TEXT, password="pw", views=12)
    repo = NoteRepository(test_session)

    with pytest.raises(NoteUnauthorizedError):
        await repo.update("bye00001", "nope", "")

    await repo.update("bye00001", "pw", "")
    with pytest.raises(NoteNotFoundError):
        await repo.fetch("bye00001")

    # the row stays so the id can't be handed out again
    row = await _stored(session_factory, "bye00001")
    assert row is not None and row.text == "" and row.views == 12


@pytest.mark.asyncio
async def test_delete(test_session, make_note):
    await make_note("bye00002", text=TEXT)
    repo = NoteRepository(test_session)

    await repo.delete("bye00002", "")
    with pytest.raises(NoteNotFoundError):
        await repo.fetch("bye00002")
    with pytest.raises(NoteNotFoundError):
        await repo.delete("bye00002", "")


@pytest.mark.asyncio
async def test_flush_counts(test_session, make_note, session_factory):
    await make_note("count001", views=5)
    await make_note("count002")
    await make_note("deleted1", text="", views=1)
    before = await _stored(session_factory, "count001")

    touched = await NoteRepository(test_session).flush_counts(
        {"count001": 3, "count002": 1, "deleted1": 4, "missing1": 2, "zero0001": 0}
    )

    assert touched == 2
    after = await _stored(session_factory, "count001")
    assert after.views == 8
    # a view is not an edit
    assert after.updated_at == before.updated_at
    assert (await _stored(session_factory, "count002")).views == 1
    assert (await _stored(session_factory, "deleted1")).views == 1
    assert await _stored(session_factory, "missing1") is None


@pytest.mark.asyncio
async def test_flush_counts_empty(test_session):
    assert await NoteRepository(test_session).flush_counts({}) == 0
