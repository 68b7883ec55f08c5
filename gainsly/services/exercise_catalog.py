"""
Gainsly API - Default Exercise Catalogue.

Fixed exercise entries used to seed MongoDB and the offline client store.
"""

from typing import Any, Dict, List


DEFAULT_EXERCISES: List[Dict[str, Any]] = [
    {
        "name": "Barbell Squat",
        "muscle_group": "Legs",
        "description": "A compound exercise that targets the quadriceps, hamstrings, and glutes",
        "image_url": "https://example.com/squat-image.jpg",
    },
    {
        "name": "Bench Press",
        "muscle_group": "Chest",
        "description": "A compound exercise that targets the chest, shoulders, and triceps",
        "image_url": "https://example.com/bench-image.jpg",
    },
    {
        "name": "Pull-ups",
        "muscle_group": "Back",
        "description": "A compound exercise that targets the back, biceps, and shoulders",
        "image_url": "https://example.com/pullup-image.jpg",
    },
    {
        "name": "Deadlift",
        "muscle_group": "Back",
        "description": "A compound exercise that targets the lower back, hamstrings, and glutes",
        "image_url": "https://example.com/deadlift-image.jpg",
    },
    {
        "name": "Overhead Press",
        "muscle_group": "Shoulders",
        "description": "A standing press that targets the shoulders and triceps",
        "image_url": "",
    },
    {
        "name": "Barbell Row",
        "muscle_group": "Back",
        "description": "A horizontal pull for the lats, rhomboids, and rear delts",
        "image_url": "",
    },
    {
        "name": "Romanian Deadlift",
        "muscle_group": "Legs",
        "description": "A hip hinge that targets the hamstrings and glutes",
        "image_url": "",
    },
    {
        "name": "Dumbbell Curl",
        "muscle_group": "Arms",
        "description": "An isolation exercise for the biceps",
        "image_url": "",
    },
    {
        "name": "Plank",
        "muscle_group": "Core",
        "description": "An isometric hold for the abdominals and lower back",
        "image_url": "",
    },
]


def get_default_exercises() -> List[Dict[str, Any]]:
    """Return a fresh copy of the default catalogue."""
    return [dict(entry) for entry in DEFAULT_EXERCISES]
