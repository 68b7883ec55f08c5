"""
Gainsly Exercise Seed Script

Inserts the default exercise catalogue into MongoDB. Exercises whose name
already exists are left alone, so the script is safe to run repeatedly.

Usage:
    python scripts/seed_exercises.py
"""
import asyncio
import logging
import sys
from pathlib import Path
from typing import List

# Add backend to path
backend_root = Path(__file__).parent.parent
sys.path.insert(0, str(backend_root))

from database import Database
from settings import settings
from gainsly.models.mongodb import ExerciseDocument
from gainsly.services.exercise_catalog import get_default_exercises

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def seed_exercises() -> List[str]:
    """
    Insert missing catalogue entries.

    Returns:
        List[str]: Names of the exercises that were inserted.
    """
    inserted = []
    for entry in get_default_exercises():
        existing = await ExerciseDocument.find_one(ExerciseDocument.name == entry["name"])
        if existing:
            logger.info(f"Skipping existing exercise: {entry['name']}")
            continue
        await ExerciseDocument(**entry).insert()
        inserted.append(entry["name"])
        logger.info(f"Inserted exercise: {entry['name']}")
    return inserted


async def main() -> None:
    await Database.connect_db(settings.DATABASE_URL, settings.DATABASE_NAME)
    try:
        inserted = await seed_exercises()
        logger.info(f"Seeding complete: {len(inserted)} exercises added")
    finally:
        await Database.close_db()


if __name__ == "__main__":
    asyncio.run(main())
