from motor.motor_asyncio import AsyncIOMotorClient
from core.config import settings

URI = settings.MONGO_URI

client = AsyncIOMotorClient(URI)
db = client[settings.DB_NAME]

def get_database():
    """FastAPI dependency returning the application database handle."""
    return db
