"""
Notes API - Note Service (Business Logic)
==========================================

What:  List, create, update and delete notes against the in-memory store.
How:   Each operation opens exactly one store transaction, does its work,
       and releases the transaction on every exit path via `with`.
Who:   Called by the notes route handlers (through the threadpool) and by tests.

Transaction Map:
    list_notes()   → read txn:  scan
    get_note()     → read txn:  point lookup
    create_note()  → write txn: id collision check → insert → commit
    update_note()  → write txn: existence check → insert (replace) → commit
    delete_note()  → write txn: delete by id → commit

Update runs its existence check inside the same write transaction as the
replacement, so a concurrent delete cannot slip in between the two.

Error Handling Strategy:
    NotFoundError and ValidationError are raised for caller problems.
    NotesApiError subclasses from the store propagate as-is; anything else
    is logged and wrapped in StoreFault.
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Callable, Iterator, List

from notes_api.exceptions import NotesApiError, NotFoundError, StoreFault, ValidationError
from notes_api.models.note import NOTES_TABLE, Note
from notes_api.store import ID_INDEX, MemDB

logger = logging.getLogger(__name__)

# Attempts at drawing an unused identifier before giving up.
MAX_ID_ATTEMPTS = 5


def new_note_id() -> str:
    return str(uuid.uuid4())


class NoteService:
    """
    Operation layer over a MemDB holding the `notes` table.

    Args:
        store:      The store to operate on (injected, never global)
        id_factory: Returns a fresh opaque identifier; defaults to UUID4
    """

    def __init__(self, store: MemDB, id_factory: Callable[[], str] = new_note_id):
        self.store = store
        self.id_factory = id_factory

    def list_notes(self) -> List[Note]:
        """
        Return every note visible in a fresh snapshot.

        Returns:
            List of notes, ordered by id; empty when the store is empty.

        Raises:
            StoreFault: The scan failed inside the store.
        """
        with self._store_errors("list notes"):
            with self.store.begin_read() as txn:
                return txn.scan(NOTES_TABLE)

    def get_note(self, note_id: str) -> Note:
        """
        Point lookup by identifier.

        Raises:
            ValidationError: `note_id` is empty.
            NotFoundError:   No note has this identifier.
        """
        self._require_id(note_id)
        with self._store_errors("get note", note_id=note_id):
            with self.store.begin_read() as txn:
                note = txn.first(NOTES_TABLE, ID_INDEX, note_id)
        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    def create_note(self, title: str, text: str) -> Note:
        """
        Create a note under a freshly generated identifier.

        The identifier comes from `id_factory` and is checked against the
        index inside the write transaction; a collision draws another one.

        Returns:
            The committed note, including its assigned identifier.

        Raises:
            StoreFault: No unused identifier after MAX_ID_ATTEMPTS, or the
                        insert/commit failed.
        """
        with self._store_errors("create note"):
            with self.store.begin_write() as txn:
                note = Note(id=self._unused_id(txn), title=title, text=text)
                txn.insert(NOTES_TABLE, note)
                txn.defer(lambda: logger.info("Created note %s", note.id))
                txn.commit()
        return note

    def update_note(self, note_id: str, title: str, text: str) -> Note:
        """
        Replace the whole note stored under `note_id`.

        Fields are not merged: the caller supplies the complete new content.

        Raises:
            ValidationError: `note_id` is empty.
            NotFoundError:   No note has this identifier; nothing is written.
            StoreFault:      The insert/commit failed.
        """
        self._require_id(note_id)
        with self._store_errors("update note", note_id=note_id):
            with self.store.begin_write() as txn:
                current = txn.first(NOTES_TABLE, ID_INDEX, note_id)
                if current is None:
                    raise NotFoundError(resource="note", resource_id=note_id)
                note = current.replace(title=title, text=text)
                txn.insert(NOTES_TABLE, note)
                txn.defer(lambda: logger.info("Updated note %s", note.id))
                txn.commit()
        return note

    def delete_note(self, note_id: str) -> bool:
        """
        Delete the note stored under `note_id`.

        Returns:
            True if a note was removed, False if there was none. Deleting an
            absent identifier is not an error.
        """
        self._require_id(note_id)
        with self._store_errors("delete note", note_id=note_id):
            with self.store.begin_write() as txn:
                removed = txn.delete_all(NOTES_TABLE, ID_INDEX, note_id)
                txn.commit()
        if removed:
            logger.info("Deleted note %s", note_id)
        else:
            logger.debug("Delete for absent note %s", note_id)
        return removed > 0

    # ── Helpers ───────────────────────────────────────────────────────────

    def _unused_id(self, txn) -> str:
        for attempt in range(1, MAX_ID_ATTEMPTS + 1):
            candidate = self.id_factory()
            if txn.first(NOTES_TABLE, ID_INDEX, candidate) is None:
                return candidate
            logger.warning(
                "Generated note id %s is already taken (attempt %d/%d)",
                candidate,
                attempt,
                MAX_ID_ATTEMPTS,
            )
        raise StoreFault(
            message="Could not allocate a unique note identifier.",
            context={"attempts": MAX_ID_ATTEMPTS},
        )

    @staticmethod
    def _require_id(note_id: str) -> None:
        if not note_id:
            raise ValidationError(message="Note identifier must not be empty", field="id")

    @contextmanager
    def _store_errors(self, action: str, **context) -> Iterator[None]:
        try:
            yield
        except NotesApiError:
            raise
        except Exception as e:
            logger.error("Store error while trying to %s: %s", action, str(e), exc_info=True)
            raise StoreFault(
                message=f"Could not {action}. Please try again.",
                context={"error_type": type(e).__name__, **context},
            ) from e
