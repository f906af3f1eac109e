from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class StreakStats(BaseModel):
    """Derived streak fields written back to a habit after a recalculation."""
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    last_entry_at: Optional[datetime] = None
