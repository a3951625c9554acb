# --------------------------------------------------
# DISCOVERY
# --------------------------------------------------

# Rows pulled from the store before distance filtering and scoring.
# Discovery is best-effort: anything past this cap is not considered.
CANDIDATE_POOL_LIMIT = 200

DEFAULT_PAGE_LIMIT = 30
MAX_PAGE_LIMIT = 100

MINIMUM_AGE = 18

EARTH_RADIUS_KM = 6371.0

# --------------------------------------------------
# SCORING
# --------------------------------------------------

ADMIRER_BOOST = 1000

# (max age in days, boost) - first matching tier wins
RECENCY_TIERS = (
    (1, 50),
    (3, 30),
    (7, 10),
)

PHOTO_BOOST = 25
MANY_PHOTOS_THRESHOLD = 3
MANY_PHOTOS_BOOST = 10

BIO_BOOST = 15
PROFESSION_BOOST = 10
EDUCATION_BOOST = 10

# jitter lies in [0, JITTER_RANGE)
JITTER_RANGE = 5.0

# --------------------------------------------------
# MESSAGING
# --------------------------------------------------

DEFAULT_MESSAGE_PAGE = 30
MAX_MESSAGE_LENGTH = 1000

BANNED_MESSAGE_PATTERNS = (
    r"sex",
    r"nude",
    r"harass",
)

GUARDIAN_AUDIT_ACTION = "guardian_message"

# --------------------------------------------------
# PROFILE
# --------------------------------------------------

# (field, weight) counted when the field is filled in
COMPLETENESS_WEIGHTS = (
    ("display_name", 10),
    ("dob", 10),
    ("city", 5),
    ("country", 5),
    ("nationality", 5),
    ("education", 5),
    ("profession", 5),
    ("sect", 5),
    ("marital_status", 5),
    ("religiousness", 10),
    ("prayer_freq", 5),
    ("bio", 5),
)
# at least one photo
COMPLETENESS_PHOTO_WEIGHT = 15

REPORT_REASON_MAX_LENGTH = 500
