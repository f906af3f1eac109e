from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime
from models.common import PyObjectId
from core.time_utils import get_current_time

Mood = Literal["great", "good", "okay", "bad", "awful"]

class EntryCreate(BaseModel):
    performed_at: Optional[datetime] = None # Defaults to "now" when omitted
    note: Optional[str] = Field(None, max_length=500)
    mood: Optional[Mood] = None

class Entry(BaseModel):
    """One logged performance of a habit. Immutable once stored."""
    id: Optional[PyObjectId] = Field(default_factory=PyObjectId, alias="_id")
    habit_id: str
    owner_id: Optional[str] = None
    performed_at: datetime = Field(default_factory=get_current_time)
    note: Optional[str] = None
    mood: Optional[Mood] = None

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
