# Routes package init
"""
Notes API - API Routes Package
===============================

Route Inventory:
    - notes.py:   GET    /notes             (list all notes)
                  POST   /notes             (create)
                  PUT    /notes/{note_id}   (replace)
                  DELETE /notes/{note_id}   (delete)
    - health.py:  GET    /api/health        (liveness)

Routes stay thin: decode the request, call NoteService, encode the result.
"""
