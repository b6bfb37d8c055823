"""
Notes API - Notes Route Handlers
=================================

What:  GET/POST /notes and PUT/DELETE /notes/{note_id}.
How:   Decode the body (FastAPI + NoteIn), call NoteService in the threadpool,
       encode the result as NoteOut. Errors are raised as exceptions and
       turned into responses by the global handlers in main.py.

The service is synchronous: a write transaction may wait on the store's
writer lock, and that wait happens on a worker thread, not the event loop.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response
from fastapi.concurrency import run_in_threadpool

from notes_api.database import get_note_service
from notes_api.schemas.note import ErrorResponse, NoteIn, NoteOut
from notes_api.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteOut],
    responses={
        500: {"description": "Store fault", "model": ErrorResponse},
    },
    summary="List all notes",
)
async def list_notes(
    service: NoteService = Depends(get_note_service),
) -> List[NoteOut]:
    notes = await run_in_threadpool(service.list_notes)
    return [NoteOut.from_note(note) for note in notes]


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteOut,
    responses={
        400: {"description": "Malformed JSON body", "model": ErrorResponse},
        500: {"description": "Store fault", "model": ErrorResponse},
    },
    summary="Create a note",
    description="Creates a note under a server-assigned identifier and returns it.",
)
async def create_note(
    payload: NoteIn,
    service: NoteService = Depends(get_note_service),
) -> NoteOut:
    note = await run_in_threadpool(service.create_note, payload.title, payload.text)
    return NoteOut.from_note(note)


@router.put(
    "/notes/{note_id}",
    response_model=NoteOut,
    responses={
        400: {"description": "Malformed JSON body", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store fault", "model": ErrorResponse},
    },
    summary="Replace a note",
    description=(
        "Replaces title and text of an existing note. Both fields are taken "
        "from the body as given; omitted fields become empty."
    ),
)
async def update_note(
    note_id: str,
    payload: NoteIn,
    service: NoteService = Depends(get_note_service),
) -> NoteOut:
    note = await run_in_threadpool(service.update_note, note_id, payload.title, payload.text)
    return NoteOut.from_note(note)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses={
        500: {"description": "Store fault", "model": ErrorResponse},
    },
    summary="Delete a note",
    description="Deletes a note. Deleting an unknown identifier also succeeds.",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> Response:
    await run_in_threadpool(service.delete_note, note_id)
    return Response(status_code=204)
