# Worker roles
ROLE_LEAD_PRIMARY = 'lead_primary'
ROLE_LEAD_DEPUTY = 'lead_deputy'
ROLE_REGULAR = 'regular'
ROLES = [ROLE_LEAD_PRIMARY, ROLE_LEAD_DEPUTY, ROLE_REGULAR]
LEADERSHIP_ROLES = {ROLE_LEAD_PRIMARY, ROLE_LEAD_DEPUTY}

# Older saved rosters used the department's own labels for roles.
ROLE_ALIASES = {
    'primar': ROLE_LEAD_PRIMARY,
    'zastupce': ROLE_LEAD_DEPUTY,
    'custom': ROLE_REGULAR,
}

# UI display names for roles
ROLE_DISPLAY_NAMES = {
    ROLE_LEAD_PRIMARY: 'Head',
    ROLE_LEAD_DEPUTY: 'Deputy',
    ROLE_REGULAR: 'Regular',
}

# Shift caps per month.
# Leadership caps are fixed and ignore whatever is configured for them.
# Only regular workers have a configurable cap; DEFAULT_CAP applies when the
# configured value is missing or not a finite number.
ROLE_FIXED_CAPS = {
    ROLE_LEAD_PRIMARY: 1,
    ROLE_LEAD_DEPUTY: 2,
}
DEFAULT_CAP = 5

# Workers ranked 1..CERTIFIED_RANK_LIMIT are certified and are the only ones
# allowed to cover Tuesdays and Thursdays.
CERTIFIED_RANK_LIMIT = 5

# A worker may touch at most this many distinct Fri/Sat/Sun blocks in a month.
MAX_WEEKEND_BLOCKS = 2

# Python weekday numbering: 0 = Monday ... 6 = Sunday
WEEKEND_SERVICE_WEEKDAYS = (4, 5, 6)   # Fri, Sat, Sun
CERTIFIED_ONLY_WEEKDAYS = (1, 3)       # Tue, Thu
WEEKDAY_SHORT = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']

# Preference levels per (worker, day)
PREF_NONE = 0
PREF_CANNOT = 1   # absolute ban
PREF_AVOID = 2    # soft penalty
PREF_WANT = 3     # binding up to the worker's own target, soft beyond it
PREFERENCE_LEVELS = (PREF_NONE, PREF_CANNOT, PREF_AVOID, PREF_WANT)
PREFERENCE_NAMES = {
    PREF_NONE: 'none',
    PREF_CANNOT: 'cannot',
    PREF_AVOID: 'avoid',
    PREF_WANT: 'want',
}
PREFERENCE_BY_NAME = {name: level for level, name in PREFERENCE_NAMES.items()}

# Soft scoring weights. Lower score = more preferred candidate.
# - 'want': pulls a wanting worker forward once their forced priority has lapsed.
# - 'avoid': pushes a worker back on days they marked as avoid.
# - 'every_other_day': added per neighbouring shift at day-2 / day+2.
# - 'target_deviation': multiplied by |count after assignment - target|.
# - 'pre_clinic': added when the next day is one of the worker's clinic days.
SCORE_WEIGHTS = {
    'want': -250,
    'avoid': 50,
    'every_other_day': 10,
    'target_deviation': 12,
    'pre_clinic': 18,
}

# Search outcome messages
TARGET_SUM_MISMATCH = 'Sum of requested shifts ({total}) does not equal the number of days in the month ({days}).'
NO_SOLUTION_UNDER_CAPS = 'Backtracking found no roster under the current caps.'

# Diagnostics
DIAGNOSTIC_TIMEOUT_SECONDS = 5.0

# Default roster: ten workers ordered by rank.
DEFAULT_WORKERS = [
    {'id': 1, 'rank': 1, 'name': 'Primář', 'role': ROLE_LEAD_PRIMARY},
    {'id': 2, 'rank': 2, 'name': 'Fero', 'role': ROLE_LEAD_DEPUTY},
    {'id': 3, 'rank': 3, 'name': 'Tom', 'role': ROLE_REGULAR},
    {'id': 4, 'rank': 4, 'name': 'Lukáš', 'role': ROLE_REGULAR},
    {'id': 5, 'rank': 5, 'name': 'Zdeněk', 'role': ROLE_REGULAR},
    {'id': 6, 'rank': 6, 'name': 'Bachri', 'role': ROLE_REGULAR},
    {'id': 7, 'rank': 7, 'name': 'Kuba', 'role': ROLE_REGULAR},
    {'id': 8, 'rank': 8, 'name': 'Adam', 'role': ROLE_REGULAR},
    {'id': 9, 'rank': 9, 'name': 'Pepa', 'role': ROLE_REGULAR},
    {'id': 10, 'rank': 10, 'name': 'Radim', 'role': ROLE_REGULAR},
]

# Fixed weekly clinic days per default worker id (Python weekday numbering).
DEFAULT_CLINIC_WEEKDAYS = {
    1: [3],   # Thursday
    2: [1],   # Tuesday
    3: [0],   # Monday
    4: [3],   # Thursday
    5: [4],   # Friday
    6: [2],   # Wednesday
    7: [1],   # Tuesday
    8: [],
    9: [4],   # Friday
    10: [2],  # Wednesday
}

MAX_WORKERS = 10
