"""
Application constants to replace magic numbers throughout the codebase.

Scoring weights and workflow thresholds are versioned here so the scoring
formula and the IHR decision rule can be audited in one place.
"""

# ========== SOCIAL RELEVANCE SCORING ==========
# Account component: official sources outrank experts, experts outrank unknowns.
ACCOUNT_TIER_POINTS = {
    1: 40.0,
    2: 25.0,
    3: 10.0,
}
DEFAULT_ACCOUNT_TIER = 3

# Keyword component
KEYWORD_POINTS_CRITICAL_AND_GCC = 30.0
KEYWORD_POINTS_CRITICAL_OR_GCC = 20.0
KEYWORD_POINTS_ANY_MATCH = 10.0

# Engagement component: min(cap, log10(likes + 2*reposts + replies + 1) * multiplier)
ENGAGEMENT_REPOST_WEIGHT = 2
ENGAGEMENT_LOG_MULTIPLIER = 4.0
ENGAGEMENT_MAX_POINTS = 20.0

# Recency component: (max age in hours, points), checked in order
RECENCY_BUCKETS = [
    (1, 10.0),
    (6, 7.0),
    (24, 5.0),
]
RECENCY_STALE_POINTS = 2.0

MAX_RELEVANCE_SCORE = 100.0
SCORE_PRECISION = 2

# ========== BEACON PRIORITY ==========
BEACON_BASE_PRIORITY = 50
BEACON_DISEASE_BONUS = {
    'ebola': 30,
    'mers': 40,
}
BEACON_COUNTRY_BONUS = {
    'saudi': 20,
    'yemen': 20,
}
BEACON_CASE_THRESHOLD = 50
BEACON_CASE_BONUS = 10
MAX_PRIORITY_SCORE = 100

GCC_COUNTRIES = ['saudi', 'united arab emirates', 'uae', 'qatar', 'kuwait', 'bahrain', 'oman']

# ========== IHR ANNEX 2 ==========
# Two or more "yes" answers out of four make the event notifiable.
IHR_YES_THRESHOLD = 2
IHR_MANDATORY_NOTIFICATION = 'Mandatory Notification'
IHR_LOCAL_MONITORING = 'Local Monitoring'

# ========== STATUSES ==========
TRIAGE_PENDING = 'Pending Triage'
TRIAGE_ACCEPTED = 'Accepted'
TRIAGE_REJECTED = 'Rejected'

SIGNAL_NEW = 'New'
SIGNAL_UNDER_ASSESSMENT = 'Under Assessment'
SIGNAL_ESCALATED = 'Escalated'
SIGNAL_RESPONSE_ACTIVATED = 'Response Activated'
SIGNAL_CLOSED = 'Closed'
SIGNAL_ARCHIVED = 'Archived'

ASSESSMENT_DRAFT = 'Draft'
ASSESSMENT_UNDER_ASSESSMENT = 'Under Assessment'
ASSESSMENT_ESCALATED = 'Escalated'
ASSESSMENT_COMPLETED = 'Completed'
ASSESSMENT_EDITABLE = [ASSESSMENT_DRAFT, ASSESSMENT_UNDER_ASSESSMENT]
ASSESSMENT_TYPE = 'IHR/RRA'

RISK_LEVELS = ['Low', 'Moderate', 'High', 'Critical']
RISK_CRITICAL = 'Critical'
CONFIDENCE_LEVELS = ['Low', 'Moderate', 'High']

DIRECTOR_PENDING = 'Pending Review'
DIRECTOR_APPROVED = 'Approved'
DIRECTOR_REJECTED = 'Rejected'
DIRECTOR_DECISIONS = [DIRECTOR_APPROVED, DIRECTOR_REJECTED]
DEFAULT_ESCALATION_LEVEL = 'Director'
DEFAULT_ESCALATION_PRIORITY = 'High'

VERIFICATION_PENDING = 'Pending'
VERIFICATION_PROMOTED = 'Promoted'
VERIFICATION_DISMISSED = 'Dismissed'

# ========== PERMISSION DOMAINS ==========
DOMAIN_TRIAGE = 'triage'
DOMAIN_ASSESSMENT = 'assessment'
DOMAIN_ESCALATION = 'escalation'
PERMISSION_EDIT = 'edit'
PERMISSION_VIEW = 'view'

# Placeholder assignee when an assessment is created without an explicit analyst
UNASSIGNED_USER_ID = '00000000-0000-0000-0000-000000000000'

# ========== INGESTION ==========
SOURCE_BEACON = 'beacon'
SOURCE_SOCIAL = 'social_listener'
PLATFORM_TWITTER = 'twitter'

# API timeouts
API_TIMEOUT_SHORT = 5
API_TIMEOUT_MEDIUM = 30
API_TIMEOUT_LONG = 60

# Database query limits
DEFAULT_QUERY_LIMIT = 50
MAX_QUERY_LIMIT = 500
