"""Business thresholds shared by the step schemas, the conditional rules and the API."""

TOTAL_STEPS = 8

CLAIMANT_NAME_MIN = 2
PHONE_MIN = 10
PROPERTY_ADDRESS_MIN = 10
INCIDENT_DESCRIPTION_MIN = 50
SIGNATURE_MIN = 10

BUILDING_DAMAGE_DESCRIPTION_MIN = 20
DAMAGE_PHOTOS_MIN = 2
REPAIR_QUOTES_MIN = 1

THEFT_DESCRIPTION_MIN = 20
POLICE_REFERENCE_MIN = 5
POLICE_REPORTS_MIN = 1

TENANT_NAME_MIN = 2
TENANCY_AGREEMENTS_MIN = 1

CLOSURE_REASON_MIN = 10
ENHANCE_TEXT_MIN = 10
ADDRESS_QUERY_MIN = 3

FILE_CATEGORIES = (
    "damage_photos",
    "repair_quotes",
    "invoices",
    "police_reports",
    "other_documents",
    "tenancy_agreements",
)

CLAIM_LIST_DEFAULT_LIMIT = 50
CLAIM_LIST_MAX_LIMIT = 500
