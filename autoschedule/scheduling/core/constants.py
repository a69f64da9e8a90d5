"""
Constants shared across the scheduling system.
"""

# Working-hours policy used when neither a named schedule nor a user preference applies
DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "17:00"
DEFAULT_DAYS_OF_WEEK = (1, 2, 3, 4, 5)  # Mon-Fri, 0=Sunday

DEFAULT_WORK_DAYS = ["monday", "tuesday", "wednesday", "thursday", "friday"]

DAY_NAME_TO_INDEX = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}
UNKNOWN_DAY_INDEX = 1  # Unrecognized day names fall back to Monday

DEFAULT_TASK_DURATION = 30   # minutes
DEFAULT_CHUNK_DURATION = 60  # minutes

# Slot search
SLOT_INTERVAL_MINUTES = 15
MAX_CANDIDATES = 20
NO_DEADLINE_HORIZON_DAYS = 30
SOFT_DEADLINE_GRACE_DAYS = 7
CALENDAR_MAX_RESULTS = 200

# Slot scoring
BASE_SCORE = 100.0
MORNING_START_HOUR = 9
MORNING_END_HOUR = 12
MORNING_BONUS = 20.0
PAST_DEADLINE_PENALTY = 50.0
DEADLINE_DAY_BONUS = 10.0

# Scheduling order weights for free-text priority labels.
# Both vocabularies ("1st Priority"... and "High/Medium/Low") are kept side by side.
PRIORITY_WEIGHTS = {
    "1st Priority": 100,
    "Big Rock": 100,
    "2nd Priority": 80,
    "Focus": 80,
    "3rd Priority": 60,
    "4th Priority": 40,
    "5th Priority": 20,
    "Quick": 30,
    "Scheduled": 50,
    "Errand": 10,
    "Remember": 5,
    "Watch": 5,
    "Someday Maybe": 1,
    "ASAP": 100,
    "High": 80,
    "Medium": 50,
    "Low": 20,
}
DEFAULT_PRIORITY_WEIGHT = 10

# ETA status values
ON_TRACK = "on_track"
AT_RISK = "at_risk"
OVERDUE = "overdue"
