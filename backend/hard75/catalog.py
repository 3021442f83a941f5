"""Static catalog of daily task kinds and log vocabularies."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class TaskDefinition:
    """A task kind every challenge day may carry."""
    key: str
    title: str
    required: bool
    details: str
    pms_only: bool = False


DEFAULT_TASKS = (
    TaskDefinition("workout1", "Workout 1 (45 min)", True,
                   "Any physical activity for 45 minutes. One must be outdoors."),
    TaskDefinition("workout2", "Workout 2 (45 min)", True,
                   "Second 45-minute workout of the day. One must be outdoors."),
    TaskDefinition("water", "Drink water (1 gallon)", True,
                   "Drink one gallon (3.8L) of water throughout the day."),
    TaskDefinition("read", "Read 10 pages", True,
                   "Read 10 pages of a non-fiction/self-improvement book."),
    TaskDefinition("diet", "Follow diet", True,
                   "Stick to your chosen diet plan. No cheat meals or alcohol."),
    TaskDefinition("photo", "Progress photo", True,
                   "Take a progress photo to track your transformation."),
    TaskDefinition("rest_recovery", "Rest & Recovery", False,
                   "Focus on rest and gentle recovery activities.", pms_only=True),
)

TASKS_BY_KEY = {task.key: task for task in DEFAULT_TASKS}
TASK_KEYS = tuple(TASKS_BY_KEY)

MOODS = ("Energetic", "Okay", "Low", "Anxious")
SYMPTOMS = ("cramps", "headache", "cravings", "fatigue", "bloating")

# Gentler substitutes for the second workout
VARIANT_TASK_KEY = "workout2"
WORKOUT2_VARIANTS = {
    "walk": "Walk (45 min)",
    "yoga": "Yoga (30 min)",
}


def task_keys_for_day(is_pms_window: bool) -> List[str]:
    """Catalog keys a day should carry given its PMS window status."""
    return [t.key for t in DEFAULT_TASKS if is_pms_window or not t.pms_only]


def display_title(key: str, title: str, variant: Optional[str] = None) -> str:
    """Title shown for a task, accounting for a workout substitution."""
    if key == VARIANT_TASK_KEY and variant in WORKOUT2_VARIANTS:
        return WORKOUT2_VARIANTS[variant]
    return title
