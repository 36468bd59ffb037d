"""Client model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class Client(TypedDict):
    """Client table row representation."""

    id: UUID
    name: str
    email: str
    cpf: str
    created_at: datetime
    updated_at: datetime
