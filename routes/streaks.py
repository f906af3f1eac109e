from fastapi import APIRouter, Depends
from core.database import get_database
from core.recalculation import recalculate_all_habits
from core.security import require_job_key

router = APIRouter(prefix="/streaks", tags=["Streaks"])

@router.post("/calculate", dependencies=[Depends(require_job_key)])
async def calculate_streaks(database=Depends(get_database)):
    """Recomputes streaks for every habit. Meant to be hit by an external cron."""
    processed = await recalculate_all_habits(database)
    return {"processed": processed}
