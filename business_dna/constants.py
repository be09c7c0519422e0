"""
Global constants for the business DNA pipeline.

Centralizes magic numbers and keyword tables used throughout
the pipeline for easier maintenance and tuning.
"""

PIPELINE_VERSION = "2.0.0"

# Crawl Budget
DEFAULT_MAX_PAGES = 12  # Hard cap on pages extracted per crawl
DEFAULT_MAX_DEPTH = 3  # Link depth from the seed URL
DEFAULT_PAGE_TIMEOUT_SECONDS = 30  # Per-page render timeout
DEFAULT_CRAWL_TIMEOUT_SECONDS = 180  # Whole-crawl wall clock budget

# Images
DEFAULT_MAX_IMAGES_PER_PAGE = 20
DEFAULT_MAX_TOTAL_IMAGES = 50
DEFAULT_MAX_IMAGES_FOR_VISION = 15  # Images sent to the vision service per run
DEFAULT_VISION_CONCURRENCY = 3

# Vision retry (transient failures only)
VISION_MAX_RETRIES = 3
VISION_INITIAL_BACKOFF_SECONDS = 0.5  # Doubles each retry: 0.5s, 1s, 2s
VISION_REQUEST_TIMEOUT_SECONDS = 30
VISION_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

# Vision confidence
VISION_CONFIDENCE_OCR = 0.9  # OCR succeeded
VISION_CONFIDENCE_PARTIAL = 0.5  # Only colors or caption succeeded

# Page content
RAW_TEXT_MAX_CHARS = 10000
MIN_PARAGRAPH_CHARS = 20
MIN_LIST_ITEM_CHARS = 5
MAX_LIST_ITEM_CHARS = 300
CLASSIFIER_BODY_WINDOW = 2000  # Chars of body text scanned for content patterns
MAX_KEY_PHRASES = 10

# Content sparsity (total raw text across pages)
SPARSITY_RICH_CHARS = 20000
SPARSITY_MODERATE_CHARS = 5000

# Entity caps
MAX_TESTIMONIALS = 6
MAX_TESTIMONIALS_LIMIT = 10
MAX_TEAM_MEMBERS = 10
MAX_TEAM_MEMBERS_LIMIT = 15
MAX_FAQS = 15
MAX_SERVICES = 12
MAX_SERVICES_LIMIT = 20
MAX_HIDDEN_GEMS = 15
MAX_BRAND_COLORS = 5
MAX_NAV_LINKS = 6
MAX_CERTIFICATIONS = 5
MAX_CORE_VALUES = 6
MAX_UNIQUE_SELLING_POINTS = 5
MAX_FAQ_ANSWER_CHARS = 500

# Cities whose mention on an image is kept as a location gem
LOCATION_GEM_CITIES = ("Durham", "Raleigh", "Charlotte", "Atlanta", "NYC", "LA", "Chicago", "Austin")

# Default brand colors when nothing usable was found
DEFAULT_PRIMARY_COLOR = "#1F2937"
DEFAULT_SECONDARY_COLOR = "#374151"
DEFAULT_ACCENT_COLOR = "#10B981"
DEFAULT_NEUTRAL_COLORS = ["#F9FAFB", "#6B7280", "#1F2937"]

# Paths crawled ahead of everything else (substring match on the lower-cased path)
PRIORITY_PATHS = [
    "/about",
    "/our-story",
    "/services",
    "/what-we-do",
    "/offerings",
    "/team",
    "/staff",
    "/meet-the-team",
    "/contact",
    "/get-in-touch",
    "/testimonials",
    "/reviews",
    "/success-stories",
    "/faq",
    "/questions",
    "/pricing",
    "/rates",
    "/packages",
    "/gallery",
    "/portfolio",
    "/our-work",
    "/projects",
    "/legal",
]

# Crawler traps and low-signal listings, never enqueued
SKIP_PATTERNS = [
    r"/calendar/",
    r"/events/\d{4}/",
    r"/blog/page/\d+",
    r"/page/\d+",
    r"/archive/",
    r"/\d{4}/\d{2}/",
    r"\?.*page=",
    r"/search",
    r"/tag/",
    r"/category/",
    r"/wp-admin/",
    r"/login",
    r"/cart",
    r"/checkout",
]

# Binary assets that are never rendered as pages
SKIP_EXTENSIONS = (
    ".pdf",
    ".doc",
    ".docx",
    ".zip",
    ".jpg",
    ".jpeg",
    ".png",
    ".gif",
    ".webp",
    ".svg",
    ".mp4",
    ".mp3",
    ".xml",
)

SOCIAL_HOSTS = (
    "facebook.com",
    "instagram.com",
    "twitter.com",
    "x.com",
    "linkedin.com",
    "youtube.com",
    "yelp.com",
    "tiktok.com",
    "pinterest.com",
)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
