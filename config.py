"""
config.py — Centralised configuration for WebCheck.
All tuneable constants live here. Override via environment variables.
"""
import os

# ── Service ────────────────────────────────────────────────────────────────────
VERSION: str = "1.0.0"
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", 3000))
ENVIRONMENT: str = os.getenv("WC_ENV", "development")

# ── HTTP / Network ─────────────────────────────────────────────────────────────
# Seconds before the page fetch is abandoned
REQUEST_TIMEOUT: float = float(os.getenv("WC_REQUEST_TIMEOUT", 10))

# Seconds for a single link-liveness probe
LINK_CHECK_TIMEOUT: float = float(os.getenv("WC_LINK_CHECK_TIMEOUT", 5))

# Redirects followed by the page fetch
PAGE_MAX_REDIRECTS: int = int(os.getenv("WC_PAGE_MAX_REDIRECTS", 21))

# Redirects followed by a link probe before it counts as broken
LINK_MAX_REDIRECTS: int = int(os.getenv("WC_LINK_MAX_REDIRECTS", 5))

USER_AGENT: str = os.getenv("WC_USER_AGENT", "WebCheck Bot/1.0")

REQUEST_HEADERS: dict = {
    "User-Agent": USER_AGENT,
}

# ── Link probe sample ──────────────────────────────────────────────────────────
MAX_INTERNAL_LINKS_TO_CHECK: int = int(os.getenv("WC_MAX_INTERNAL_LINKS", 10))
MAX_EXTERNAL_LINKS_TO_CHECK: int = int(os.getenv("WC_MAX_EXTERNAL_LINKS", 5))

# ── Report display caps ────────────────────────────────────────────────────────
MAX_MISSING_ALT_TO_DISPLAY: int = int(os.getenv("WC_MAX_MISSING_ALT", 20))
MAX_HEADERS_TO_DISPLAY: int = int(os.getenv("WC_MAX_HEADERS", 30))

# Characters of heading text kept per structure entry
HEADER_TEXT_PREVIEW: int = 50

# ── SEO thresholds ─────────────────────────────────────────────────────────────
TITLE_MIN_LENGTH: int = 30
TITLE_MAX_LENGTH: int = 60
META_DESCRIPTION_MIN_LENGTH: int = 120
META_DESCRIPTION_MAX_LENGTH: int = 160

# ── Performance thresholds ─────────────────────────────────────────────────────
# Raw HTML size (bytes) above which the page is flagged as large
LARGE_PAGE_BYTES: int = int(os.getenv("WC_LARGE_PAGE_BYTES", 500_000))
MAX_INLINE_STYLES: int = 10
MAX_EXTERNAL_SCRIPTS: int = 15
MAX_STYLESHEETS: int = 5
MAX_NON_LAZY_IMAGES: int = 5

# ── Scoring ────────────────────────────────────────────────────────────────────
# Fixed weights of the overall score
SEO_WEIGHT: float = 0.4
ACCESSIBILITY_WEIGHT: float = 0.3
PERFORMANCE_WEIGHT: float = 0.3

# Lower bound (inclusive) of each score label, best first
SCORE_THRESHOLDS: tuple = (
    ("Excellent", 90),
    ("Good", 70),
    ("Fair", 50),
    ("Poor", 0),
)
