"""Datenmodell für einen Tutor (Pydantic v2)."""

from pydantic import BaseModel


class Tutor(BaseModel):
    """Ein Nutzer mit Rolle 'tutor' aus der Sammlung 'users'."""

    id: str
    name: str
    role: str = "tutor"
    email: str = ""
    subjects: list[str] = []
