import logging
from fastapi import APIRouter, HTTPException, Depends, Query, status
from typing import List
from bson import ObjectId
from models.habit import Habit, HabitCreate
from models.entry import Entry, EntryCreate
from models.streak import StreakStats
from core.database import get_database
from core.security import get_current_owner
from core.recalculation import recalculate_habit
from core.time_utils import get_current_time, to_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/habits", tags=["Habits"])

async def _get_owned_habit(database, habit_id: str, owner_id: str) -> dict:
    """Fetches a habit document, hiding other owners' habits behind a 404."""
    if not ObjectId.is_valid(habit_id):
        raise HTTPException(status_code=404, detail="Habit not found")
    habit_data = await database.habits.find_one({"_id": ObjectId(habit_id), "owner_id": owner_id})
    if not habit_data:
        raise HTTPException(status_code=404, detail="Habit not found")
    return habit_data

@router.post("/", response_model=Habit, status_code=status.HTTP_201_CREATED)
async def create_habit(
    habit_in: HabitCreate,
    owner_id: str = Depends(get_current_owner),
    database=Depends(get_database),
):
    now = get_current_time()
    habit = Habit(
        owner_id=owner_id,
        title=habit_in.title,
        description=habit_in.description,
        created_at=now,
        updated_at=now,
    )

    habit_dump = habit.model_dump(by_alias=True, exclude={"id"})
    result = await database.habits.insert_one(habit_dump)
    created_habit = await database.habits.find_one({"_id": result.inserted_id})
    logger.info("Habit %s created for owner %s", result.inserted_id, owner_id)
    return Habit(**created_habit)

@router.get("/", response_model=List[Habit])
async def get_habits(owner_id: str = Depends(get_current_owner), database=Depends(get_database)):
    cursor = database.habits.find({"owner_id": owner_id}).sort("created_at", -1)
    habits = await cursor.to_list(length=100)
    return [Habit(**h) for h in habits]

@router.get("/{habit_id}", response_model=Habit)
async def get_habit(habit_id: str, owner_id: str = Depends(get_current_owner), database=Depends(get_database)):
    habit_data = await _get_owned_habit(database, habit_id, owner_id)
    return Habit(**habit_data)

@router.delete("/{habit_id}")
async def delete_habit(habit_id: str, owner_id: str = Depends(get_current_owner), database=Depends(get_database)):
    """Deletes a habit together with all of its entries."""
    habit_data = await _get_owned_habit(database, habit_id, owner_id)

    # Entries first, so a failed cascade leaves the habit in place to retry
    result = await database.entries.delete_many({"habit_id": habit_id})
    await database.habits.delete_one({"_id": habit_data["_id"]})
    logger.info("Habit %s deleted (%d entries)", habit_id, result.deleted_count)
    return {"message": "Habit deleted", "entries_deleted": result.deleted_count}

@router.post("/{habit_id}/entries", response_model=Entry, status_code=status.HTTP_201_CREATED)
async def log_entry(
    habit_id: str,
    entry_in: EntryCreate,
    owner_id: str = Depends(get_current_owner),
    database=Depends(get_database),
):
    """
    Logs one performance of a habit.

    Streak counts are left to the recalculation job; only last_entry_at and
    updated_at are touched here. last_entry_at never moves backwards when a
    back-dated entry is logged.
    """
    habit_data = await _get_owned_habit(database, habit_id, owner_id)
    now = get_current_time()
    performed_at = to_utc(entry_in.performed_at) if entry_in.performed_at else now

    entry = Entry(
        habit_id=habit_id,
        owner_id=owner_id,
        performed_at=performed_at,
        note=entry_in.note,
        mood=entry_in.mood,
    )
    result = await database.entries.insert_one(entry.model_dump(by_alias=True, exclude={"id"}))

    await database.habits.update_one(
        {"_id": habit_data["_id"]},
        {
            "$max": {"last_entry_at": performed_at},
            "$set": {"updated_at": now}
        }
    )

    created_entry = await database.entries.find_one({"_id": result.inserted_id})
    return Entry(**created_entry)

@router.get("/{habit_id}/entries", response_model=List[Entry])
async def get_entries(
    habit_id: str,
    limit: int = Query(20, ge=1, le=120),
    owner_id: str = Depends(get_current_owner),
    database=Depends(get_database),
):
    """Most recent entries of a habit, newest first."""
    await _get_owned_habit(database, habit_id, owner_id)
    entries = await database.entries.find(
        {"habit_id": habit_id}
    ).sort("performed_at", -1).limit(limit).to_list(limit)
    return [Entry(**e) for e in entries]

@router.post("/{habit_id}/recalculate", response_model=StreakStats)
async def recalculate(habit_id: str, owner_id: str = Depends(get_current_owner), database=Depends(get_database)):
    habit_data = await _get_owned_habit(database, habit_id, owner_id)
    return await recalculate_habit(database, habit_data)
