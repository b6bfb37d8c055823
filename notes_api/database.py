"""
Notes API - Store Construction and Request Dependencies
========================================================

What:  The notes schema, the store factory, and the FastAPI dependencies
       that hand the store (wrapped in a NoteService) to route handlers.
How:   create_app() builds one MemDB and keeps it on `app.state.store`.
       Each request resolves get_note_service(), which wraps that store.
Who:   Route handlers via Depends(); tests build stores directly.

Lifecycle:
    The store is created empty when the application is created and lives
    until the process exits. There is no connection to open or close.
"""

from fastapi import Request

from notes_api.exceptions import StoreFault
from notes_api.models.note import NOTES_TABLE
from notes_api.services.note_service import NoteService
from notes_api.store import DBSchema, IndexSchema, MemDB, TableSchema, UUIDFieldIndex


# ── Schema ────────────────────────────────────────────────────────────────
# One table, one unique index over the UUID-valued `id` attribute.
NOTES_SCHEMA = DBSchema(
    tables={
        NOTES_TABLE: TableSchema(
            name=NOTES_TABLE,
            indexes={
                "id": IndexSchema(
                    name="id",
                    unique=True,
                    indexer=UUIDFieldIndex(field="id"),
                ),
            },
        ),
    },
)


def create_store() -> MemDB:
    """Build an empty store for the notes schema."""
    return MemDB(NOTES_SCHEMA)


# ── Request Dependencies ──────────────────────────────────────────────────
def get_store(request: Request) -> MemDB:
    """
    FastAPI dependency returning the application's store.

    Raises:
        StoreFault: The application was built without a store (a wiring bug).
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreFault(message="The note store has not been initialized.")
    return store


def get_note_service(request: Request) -> NoteService:
    """
    FastAPI dependency that provides a NoteService bound to the app's store.

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(service: NoteService = Depends(get_note_service)):
            ...
    """
    return NoteService(store=get_store(request))
