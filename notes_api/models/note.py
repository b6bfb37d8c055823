"""
Notes API - Note Record
========================

What:  The record stored in the `notes` table.
How:   A frozen dataclass; an update stores a new instance under the same id,
       so a record handed to a caller can never change underneath it.

Fields:
    - id:    UUID4 in canonical text form, assigned by NoteService on create
    - title: free-form text
    - text:  free-form text
"""

from dataclasses import dataclass

NOTES_TABLE = "notes"


@dataclass(frozen=True)
class Note:
    """A single note. Equality is by value across all three fields."""

    id: str
    title: str = ""
    text: str = ""

    def replace(self, title: str, text: str) -> "Note":
        """Full replacement under the same id."""
        return Note(id=self.id, title=title, text=text)
