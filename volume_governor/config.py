"""Configuration for the volume governance engine."""

import os

# GCP Project
PROJECT_ID = os.getenv("GCP_PROJECT_ID")  # None: clients resolve the project from the environment
REGION = os.getenv("GCP_REGION", "europe-west1")

# Firestore collections
LEDGER_COLLECTION = os.getenv("GOVERNOR_LEDGER_COLLECTION", "volume_ledgers")
APPROACHES_COLLECTION = os.getenv("GOVERNOR_APPROACHES_COLLECTION", "training_approaches")

# LLM models
MODEL_SELECTION = os.getenv("GOVERNOR_MODEL_SELECTION", "gemini-2.5-pro")  # Exercise selection
MODEL_ADVISOR = os.getenv("GOVERNOR_MODEL_ADVISOR", "gemini-2.5-flash")  # Validator suggestions
LLM_MAX_RETRIES = 5
LLM_BASE_DELAY_SECS = 5.0

# Volume landmark thresholds (ratio of current volume to landmark)
APPROACHING_MAV_RATIO = float(os.getenv("GOVERNOR_APPROACHING_MAV_RATIO", "0.80"))
APPROACHING_MRV_RATIO = float(os.getenv("GOVERNOR_APPROACHING_MRV_RATIO", "0.70"))

# Readiness buckets (1-5 self report)
READINESS_HIGH_FATIGUE_BELOW = 2.5
READINESS_FRESH_AT_OR_ABOVE = 3.5

# Consecutive training days
CONSECUTIVE_DAYS_OVERLAY = 3
CONSECUTIVE_DAYS_SUBOPTIMAL_SPLIT = 5
FRESH_CYCLE_MAX_WORKOUTS = 3  # overlay suppressed while workouts_completed <= this

# Volume adjustments (percent)
HIGH_FATIGUE_VOLUME_ADJUSTMENT = -10
DELOAD_VOLUME_ADJUSTMENT = -20
CALORIC_VOLUME_ADJUSTMENT = int(os.getenv("GOVERNOR_CALORIC_VOLUME_ADJUSTMENT", "15"))
VOLUME_ADJUSTMENT_MIN = -20
VOLUME_ADJUSTMENT_MAX = 20

# Volume accounting
SECONDARY_MUSCLE_CREDIT = 0.5
TARGET_VOLUME_TOLERANCE = 0.20
DEFAULT_SETS_PER_EXERCISE = 3
DEFAULT_RIR_TARGET = 2
EXCEEDED_MRV_EXERCISE_CAP = 0  # no new exercises for a muscle past MRV
APPROACHING_MRV_EXERCISE_CAP = 1

# Split type change
SPLIT_CHANGE_THRESHOLD = 0.20
WEAK_POINT_VOLUME_MULTIPLIER = 1.5

# Verdict payload word budgets
MAX_REASONING_WORDS = 40
MAX_REASON_WORDS = 25
MAX_SUGGESTION_WORDS = 30
