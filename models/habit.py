from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from models.common import PyObjectId
from core.time_utils import get_current_time

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000

class HabitCreate(BaseModel):
    # Length limits are checked after stripping, in the validators below
    title: str
    description: str = ""

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Give your habit a title.")
        if len(value) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters.")
        return value

    @field_validator("description")
    @classmethod
    def strip_description(cls, value: str) -> str:
        value = value.strip()
        if len(value) > DESCRIPTION_MAX_LENGTH:
            raise ValueError(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters.")
        return value

class Habit(BaseModel):
    """
    Represents a Habit in the system.

    Attributes:
    - current_streak: Consecutive days with at least one entry, ending today or yesterday.
    - longest_streak: All-time high streak. Never decreases across recalculations.
    - last_entry_at: performed_at of the newest entry, if any.

    The streak fields are derived; only the recalculation job writes them.
    """
    id: Optional[PyObjectId] = Field(default_factory=PyObjectId, alias="_id")
    owner_id: Optional[str] = None
    title: str = Field(..., max_length=100)
    description: str = ""
    visibility: str = "private"

    # Derived Streak Fields
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_entry_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=get_current_time)
    updated_at: datetime = Field(default_factory=get_current_time)

    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True
