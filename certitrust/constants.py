LANG_EN = "EN"
LANG_ID = "ID"
LANGUAGES = (LANG_EN, LANG_ID)
DEFAULT_LANGUAGE = LANG_ID

STATUS_DRAFT = "draft"
STATUS_PUBLISHED = "published"
STATUSES = (STATUS_DRAFT, STATUS_PUBLISHED)

DEFAULT_ORGANIZATION_NAME = "Politeknik ATI Padang"

DEFAULT_PREFIXES = {
    "participant": "SRT-PST/{YEAR}/",
    "speaker": "SRT-NRS/{YEAR}/",
    "instructor": "SRT-INS/{YEAR}/",
}

YEAR_PLACEHOLDER = "{YEAR}"

DEMO_ORIGIN = "https://certitrust.demo"
VERIFY_PATH = "/#/verify/"

FIELD_KEYS = (
    "recipientName",
    "recipientRole",
    "eventName",
    "issueDate",
    "certificateNumber",
    "customText",
    "qr_verification",
)
QR_FIELD_KEY = "qr_verification"
WRAPPED_FIELD_KEY = "eventName"

FIELD_TYPES = ("text", "date", "qr")
ALIGNMENTS = ("left", "center", "right")
FONT_WEIGHTS = ("normal", "bold")

MIN_SCALE = 0.05
MAX_SCALE = 4.0
