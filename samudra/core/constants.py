"""
Registry constants: roles, lifecycle states, scoring tables and store keys.
"""

# User roles
ROLE_PROJECT_MANAGER = "project_manager"
ROLE_NCCR_VERIFIER = "nccr_verifier"
ROLE_BUYER = "buyer"
USER_ROLES = (ROLE_PROJECT_MANAGER, ROLE_NCCR_VERIFIER, ROLE_BUYER)

ECOSYSTEM_TYPES = ("mangrove", "saltmarsh", "seagrass", "coastal_wetland")

# Store keys
TOTAL_CREDITS_ISSUED_KEY = "total_credits_issued"
TOTAL_CREDITS_RETIRED_KEY = "total_credits_retired"
PROJECT_PREFIX = "project"
MRV_PREFIX = "mrv"
CREDIT_PREFIX = "credit"
RETIREMENT_PREFIX = "retirement"
PAYOUT_PREFIX = "payout"
ML_VERIFICATION_PREFIX = "ml_verification"

# MRV submission rules
MIN_MRV_FIELD_LENGTH = 50

# Simulated MRV measurement ranges
CARBON_ESTIMATE_MIN = 50  # tCO2e, inclusive
CARBON_ESTIMATE_MAX = 150  # tCO2e, exclusive
BIOMASS_HEALTH_MIN = 0.7
BIOMASS_HEALTH_SPAN = 0.3

# Scoring heuristic
BASE_SCORE = 0.5
BASE_CONFIDENCE = 0.8

ECOSYSTEM_SCORES = {
    "mangrove": 0.2,
    "seagrass": 0.15,
    "saltmarsh": 0.1,
    "coastal_wetland": 0.08,
}

COASTAL_STATES = (
    "gujarat", "maharashtra", "goa", "karnataka", "kerala",
    "tamil nadu", "andhra pradesh", "odisha", "west bengal",
    "puducherry", "daman", "diu", "lakshadweep", "andaman", "nicobar",
)

PRIORITY_REGIONS = ("sundarbans", "kerala backwaters", "chilika", "pulicat")

DESCRIPTION_KEY_TERMS = (
    "restoration", "conservation", "monitoring", "community",
    "sustainable", "biodiversity", "carbon sequestration",
    "ecosystem services", "coastal protection", "climate change",
    "mrv", "verification", "baseline", "stakeholder",
)

NAME_KEYWORDS = ("mangrove", "restoration", "conservation", "blue carbon", "coastal", "marine")
