"""
Application-wide constants.
Point policy, rank table, statuses, milestone texts and runtime defaults.
"""

# === POINT POLICY ===
POINTS_APPLICATION = 10
POINTS_INTERVIEW = 25
POINTS_OFFER = 50
POINTS_STREAK_BONUS = 5

# (name, threshold) ascending; first threshold must be 0
DEFAULT_RANKS = [
    ("Newcomer", 0),
    ("Applicant", 50),
    ("Interviewer", 150),
    ("Contender", 350),
    ("Top Candidate", 600),
    ("Job Seeker Pro", 1000),
]

# === APPLICATION STATUSES ===
STATUS_APPLIED = "applied"
STATUS_INTERVIEW = "interview"
STATUS_OFFERED = "offered"
STATUS_REJECTED = "rejected"
STATUS_ACCEPTED = "accepted"

APPLICATION_STATUSES = (
    STATUS_APPLIED,
    STATUS_INTERVIEW,
    STATUS_OFFERED,
    STATUS_REJECTED,
    STATUS_ACCEPTED,
)
INTERVIEW_OR_BETTER = frozenset({STATUS_INTERVIEW, STATUS_OFFERED, STATUS_ACCEPTED})
OFFER_OR_BETTER = frozenset({STATUS_OFFERED, STATUS_ACCEPTED})

STATUS_FILTER_ALL = "all"

# === ACTIONS ===
ACTION_CREATE_APPLICATION = "create_application"
ACTION_UPDATE_STATUS = "update_status"
ACTION_STREAK_BONUS = "streak_bonus"
ACTION_BULK_IMPORT = "bulk_import"
ACTION_SESSION_START = "session_start"  # scores 0, records the visit

# === MILESTONES ===
MILESTONE_RANK_UP = "rank_up"
MILESTONE_FIRST_APPLICATION = "first_application"
MILESTONE_TEN_APPLICATIONS = "ten_applications"
MILESTONE_FIRST_INTERVIEW = "first_interview"
MILESTONE_FIRST_OFFER = "first_offer"
MILESTONE_FIVE_DAY_STREAK = "five_day_streak"

TIER_STANDARD = "standard"
TIER_ACHIEVEMENT = "achievement"
TIER_RANK_UP = "rank-up"

MILESTONE_TIERS = {
    MILESTONE_RANK_UP: TIER_RANK_UP,
    MILESTONE_FIRST_INTERVIEW: TIER_ACHIEVEMENT,
    MILESTONE_FIRST_OFFER: TIER_ACHIEVEMENT,
    MILESTONE_FIVE_DAY_STREAK: TIER_ACHIEVEMENT,
    MILESTONE_FIRST_APPLICATION: TIER_STANDARD,
    MILESTONE_TEN_APPLICATIONS: TIER_STANDARD,
}

# Rank-up texts take the new rank name
MILESTONE_TEXTS = {
    MILESTONE_FIRST_APPLICATION: (
        "First Step!",
        "You submitted your first application. Keep going!",
    ),
    MILESTONE_FIRST_INTERVIEW: (
        "Interview Secured!",
        "Your first interview, great progress!",
    ),
    MILESTONE_FIRST_OFFER: (
        "Offer Received!",
        "You got your first offer. Congratulations!",
    ),
    MILESTONE_FIVE_DAY_STREAK: (
        "5-Day Streak!",
        "Five days of consistent progress. You're on fire!",
    ),
    MILESTONE_TEN_APPLICATIONS: (
        "10 Applications!",
        "You've submitted 10 applications. Momentum is building!",
    ),
    MILESTONE_RANK_UP: (
        "Rank Up: {rank}!",
        "You've advanced to {rank}. Keep climbing!",
    ),
}

TEN_APPLICATIONS_COUNT = 10
FIVE_DAY_STREAK = 5

# Seconds a milestone stays on screen before the next one is promoted
MILESTONE_DISPLAY_SECONDS = 4

# === RUNTIME DEFAULTS ===
DEFAULT_DATABASE_URL = "sqlite:///./job_tracker.db"
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/job-tracker"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"
DEFAULT_LOG_FILE = "app.log"

CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

API_KEY_HEADER = "X-API-Key"
