AREA_CONTEXT = "area"
AREA_DISPLAY_NAME = "ระดับเขตพื้นที่การศึกษา"
UNKNOWN_CLUSTER_NAME = "ระดับเขตพื้นที่"

# Permission levels supplied by the calling application
LEVEL_ADMIN = "admin"
LEVEL_AREA = "area"
LEVEL_GROUP_ADMIN = "group_admin"
AREA_LEVELS = {LEVEL_ADMIN, LEVEL_AREA}

FRAME_SIMPLE_GOLD = "simple-gold"
FRAME_INFINITE_WAVE = "infinite-wave"
FRAME_ORNAMENTAL_CORNERS = "ornamental-corners"
FRAME_THAI_PREMIUM = "thai-premium"
FRAME_NONE = "none"

FRAME_STYLES = [
    FRAME_SIMPLE_GOLD,
    FRAME_INFINITE_WAVE,
    FRAME_ORNAMENTAL_CORNERS,
    FRAME_THAI_PREMIUM,
    FRAME_NONE,
]

# Frame styles only the organization-wide context may use
ROOT_ONLY_FRAME_STYLES = {FRAME_THAI_PREMIUM}

DEFAULT_FRAME_STYLE = FRAME_SIMPLE_GOLD

SYSTEM_DEFAULT_FONT = "Sarabun"

PAGE_WIDTH_MM = 297.0
PAGE_HEIGHT_MM = 210.0
PAGE_SIZE_CSS = "A4 landscape"

BUDDHIST_ERA_OFFSET = 543

THAI_MONTHS = [
    "มกราคม",
    "กุมภาพันธ์",
    "มีนาคม",
    "เมษายน",
    "พฤษภาคม",
    "มิถุนายน",
    "กรกฎาคม",
    "สิงหาคม",
    "กันยายน",
    "ตุลาคม",
    "พฤศจิกายน",
    "ธันวาคม",
]

UPLOAD_ROOT = "uploads/certificates"

# Packaged emblem shown as the left logo of a fresh template
DEFAULT_LOGO_URL = "/static/certificates/emblem.svg"
