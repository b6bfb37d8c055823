# Services package init
"""
Notes API - Services Layer
===========================

What:  Business logic between routes (HTTP) and the in-memory store.
How:   Services take their store as a constructor argument and return plain
       records; they know nothing about HTTP.

Service Inventory:
    - NoteService: list / get / create / update / delete notes
"""
