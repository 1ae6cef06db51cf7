"""
analyzer.py — WebCheck core engine.

One page per analysis:
  1. fetch the HTML once (fetcher.py) and parse it once (document.py);
  2. run the SEO / accessibility / performance / header / image checks
     sequentially against the shared, read-only Document;
  3. probe a fixed sample of links concurrently (ThreadPoolExecutor);
  4. combine the three sub-scores into one weighted overall score.

Every check below is a plain function of the Document: it starts at 100,
applies fixed deductions and returns {score, issues[, recommendations]}.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from urllib.parse import urljoin, urlparse, urlsplit, urlunsplit

import requests

import config as cfg
from document import Document
from fetcher import fetch, new_session, validate_url

logger = logging.getLogger(__name__)


# ── Helpers ────────────────────────────────────────────────────────────────────

def _clamp(score: int) -> int:
    return max(0, min(100, score))


def score_label(score: int) -> str:
    """Human label for a 0-100 score (Excellent / Good / Fair / Poor)."""
    for label, lower in cfg.SCORE_THRESHOLDS:
        if score >= lower:
            return label
    return cfg.SCORE_THRESHOLDS[-1][0]


def overall_score(seo: int, accessibility: int, performance: int) -> int:
    """Weighted combination: 40% SEO, 30% accessibility, 30% performance."""
    total = (seo * cfg.SEO_WEIGHT
             + accessibility * cfg.ACCESSIBILITY_WEIGHT
             + performance * cfg.PERFORMANCE_WEIGHT)
    # half-up, not banker's rounding
    return _clamp(int(total + 0.5))


# ── 1. SEO ─────────────────────────────────────────────────────────────────────

def check_seo(doc: Document) -> dict:
    issues, recommendations = [], []
    score = 100

    title = doc.text("title")
    if not title:
        issues.append("❌ Your page is missing a title. Visitors won't know what your page is about!")
        recommendations.append('📝 Add a clear, descriptive title to your page '
                               '(like "My Bakery - Fresh Homemade Cookies")')
        score -= 15
    elif len(title) < cfg.TITLE_MIN_LENGTH:
        issues.append("📏 Your page title is too short. It should describe what your page is about.")
        recommendations.append("📏 Make your title longer and more descriptive (50-60 characters is perfect)")
        score -= 5
    elif len(title) > cfg.TITLE_MAX_LENGTH:
        issues.append("📏 Your page title is too long. It might get cut off in search results.")
        recommendations.append("📏 Shorten your title to 50-60 characters so it's fully visible")
        score -= 5

    meta_desc = doc.attr('meta[name="description"]', "content")
    if not meta_desc:
        issues.append("❌ Your page is missing a meta description. "
                      "You're missing a chance to attract visitors!")
        recommendations.append("📝 Write a short paragraph (150-160 characters) "
                               "describing what your page offers")
        score -= 15
    elif len(meta_desc) < cfg.META_DESCRIPTION_MIN_LENGTH:
        issues.append("📏 Your meta description is too short to explain what your page offers")
        recommendations.append("📏 Expand your meta description to better explain your page "
                               "(150-160 characters ideal)")
        score -= 5
    elif len(meta_desc) > cfg.META_DESCRIPTION_MAX_LENGTH:
        issues.append("📏 Your meta description is too long. Search engines may cut it off.")
        recommendations.append("📏 Keep your meta description under 160 characters so it displays fully")
        score -= 5

    if not doc.exists('link[rel="canonical"]'):
        recommendations.append("🔗 Add a canonical URL to help search engines understand your main page "
                               "(prevents duplicate content issues)")
        score -= 5

    if not doc.exists('meta[property^="og:"]'):
        recommendations.append("📱 Add social media preview images so your links look great "
                               "when shared on Facebook, Twitter, etc.")
        score -= 5

    # Advisory only, no deduction
    if not doc.exists('meta[name="robots"]'):
        recommendations.append("🤖 Consider adding a robots meta tag to control how search engines "
                               "index your page")

    return {"score": _clamp(score), "issues": issues, "recommendations": recommendations}


# ── 2. Accessibility ───────────────────────────────────────────────────────────

def _has_label(el) -> bool:
    return Document.previous_sibling_is(el, "label") or Document.parent_is(el, "label")


def check_accessibility(doc: Document) -> dict:
    issues = []
    score = 100

    images_without_alt = doc.count("img:not([alt])")
    if images_without_alt > 0:
        issues.append(f"🖼️ {images_without_alt} image(s) on your page don't have descriptions. "
                      "This helps visually impaired visitors using screen readers.")
        score -= min(30, images_without_alt * 5)

    unlabeled = [el for el in doc.select('input:not([type="hidden"]):not([aria-label])')
                 if not _has_label(el)]
    if unlabeled:
        issues.append(f"📋 {len(unlabeled)} form field(s) don't have labels. "
                      "Visitors might not know what information to enter.")
        score -= min(20, len(unlabeled) * 5)

    if not doc.exists("html[lang]"):
        issues.append("🌐 Your website is missing a language setting. "
                      "This helps search engines and translation tools.")
        score -= 10

    if not doc.exists('[role="main"], main, [role="navigation"], nav'):
        issues.append("🗺️ Your page is missing navigation landmarks. "
                      "These help visitors find content more easily.")
        score -= 10

    return {"score": _clamp(score), "issues": issues}


# ── 3. Performance ─────────────────────────────────────────────────────────────

def _is_legacy_format(src: str | None) -> bool:
    return bool(src) and ".webp" not in src and ".avif" not in src


def check_performance(doc: Document, html: str) -> dict:
    issues = []
    score = 100

    html_size = len(html.encode("utf-8"))
    if html_size > cfg.LARGE_PAGE_BYTES:
        issues.append(f"📦 Your webpage is quite large ({html_size / 1024:.2f} KB). "
                      "Large pages load slower.")
        score -= 15

    inline_styles = doc.count("[style]")
    if inline_styles > cfg.MAX_INLINE_STYLES:
        issues.append(f"🎨 You have {inline_styles} elements with inline styles. "
                      "This makes your site harder to update.")
        score -= 10

    external_scripts = doc.count("script[src]")
    if external_scripts > cfg.MAX_EXTERNAL_SCRIPTS:
        issues.append(f"⚡ You're loading {external_scripts} external scripts. "
                      "Too many scripts can slow down your site.")
        score -= 10

    stylesheets = doc.count('link[rel="stylesheet"]')
    if stylesheets > cfg.MAX_STYLESHEETS:
        issues.append(f"🎨 You're loading {stylesheets} stylesheet files. "
                      "Combining them could make your site faster.")
        score -= 5

    # Fires once no matter how many images qualify
    if any(_is_legacy_format(Document.attr_of(img, "src")) for img in doc.select("img")):
        issues.append("🖼️ You have images that could be compressed. Smaller images load faster.")
        score -= 10

    non_lazy = doc.count('img:not([loading="lazy"])')
    if non_lazy > cfg.MAX_NON_LAZY_IMAGES:
        issues.append(f"⚡ {non_lazy} images aren't using lazy loading. "
                      "This loads all images at once, slowing your site.")
        score -= 5

    return {"score": _clamp(score), "issues": issues}


# ── 4. Header structure & images ───────────────────────────────────────────────

def audit_headers(doc: Document) -> dict:
    h1_count = doc.count("h1")
    structure = [
        f"<{el.name}> {Document.tag_text(el)[:cfg.HEADER_TEXT_PREVIEW]}"
        for el in doc.select("h1, h2, h3, h4, h5, h6")
    ]
    return {
        "h1Count": h1_count,
        "hasMultipleH1": h1_count > 1,
        "structure": structure[:cfg.MAX_HEADERS_TO_DISPLAY],
    }


def audit_images(doc: Document) -> dict:
    images = doc.select("img")
    # Presence test only: alt="" counts as described
    without_alt = [img for img in images if not Document.has_attr(img, "alt")]
    missing_alt = [Document.attr_of(img, "src") or "unknown" for img in without_alt]
    return {
        "total": len(images),
        "withoutAlt": len(without_alt),
        "missingAlt": missing_alt[:cfg.MAX_MISSING_ALT_TO_DISPLAY],
    }


# ── 5. Future scope ────────────────────────────────────────────────────────────

def future_scope(doc: Document) -> list:
    tips = []
    if not doc.exists('meta[name="viewport"]'):
        tips.append("📱 Add a viewport meta tag to make your site look good on mobile phones and tablets")
    if not doc.exists('link[rel="icon"], link[rel="shortcut icon"]'):
        tips.append("⭐ Favicons help visitors recognize your site in bookmarks and tabs")
    if not doc.exists('meta[property="og:image"]'):
        tips.append("🖼️ Add an Open Graph image so your links look great when shared on social media")
    if not doc.exists('script[type="application/ld+json"]'):
        tips.append("🧩 Structured data helps search engines understand your content better "
                    "(can improve search rankings)")
    if doc.exists("script[src]:not([async]):not([defer])"):
        tips.append("⚡ Add async or defer attributes to script tags to improve page loading speed")

    tips.append("🔐 Consider implementing a Content Security Policy (CSP) to protect against hackers")
    tips.append("🚀 Progressive Web App (PWA) features can make your site work like a mobile app")
    tips.append("📊 Add analytics to understand how visitors use your site and what to improve")
    return tips


# ── 6. Links ───────────────────────────────────────────────────────────────────

def normalize_link(url: str) -> str:
    """
    Lowercase the scheme, and for http(s) also the host, giving an empty
    path "/" so that https://x.org and https://x.org/ are one link.
    """
    parts = urlsplit(url)
    scheme, netloc, path = parts.scheme.lower(), parts.netloc, parts.path
    if scheme in ("http", "https") and netloc:
        userinfo, at, hostport = netloc.rpartition("@")
        netloc = userinfo + at + hostport.lower()
        path = path or "/"
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def collect_links(doc: Document, page_url: str) -> tuple[list, list]:
    """
    Resolve every <a href> against page_url and split by hostname.
    Document order is kept and duplicates are allowed. Links without a
    host (mailto:, javascript:) land in external; only hrefs that fail
    to resolve are dropped.
    """
    host = urlparse(page_url).hostname
    internal, external = [], []
    for a in doc.select("a[href]"):
        href = Document.attr_of(a, "href")
        if not href:
            continue
        try:
            full_url = normalize_link(urljoin(page_url, href.strip()))
            link_host = urlparse(full_url).hostname
        except ValueError:
            continue
        (internal if link_host == host else external).append(full_url)
    return internal, external


def probe_sample(internal: list, external: list) -> list:
    """First N internal plus first M external links, de-duplicated in order."""
    sample = (internal[:cfg.MAX_INTERNAL_LINKS_TO_CHECK]
              + external[:cfg.MAX_EXTERNAL_LINKS_TO_CHECK])
    return list(dict.fromkeys(sample))


def probe_link(session: requests.Session, link: str) -> bool:
    """
    True if the link answers a HEAD with a status in [200, 400).
    Designed to be called from a ThreadPoolExecutor.
    """
    try:
        r = session.head(link, timeout=cfg.LINK_CHECK_TIMEOUT, allow_redirects=True)
        return 200 <= r.status_code < 400
    except requests.exceptions.RequestException as e:
        logger.debug("Probe failed for %s: %s", link, e)
        return False


def check_broken_links(session: requests.Session, internal: list, external: list) -> dict:
    """Probe the sample concurrently; links outside it are never reported."""
    sample = probe_sample(internal, external)
    broken_internal, broken_external = [], []
    if not sample:
        return {"internal": broken_internal, "external": broken_external}

    with ThreadPoolExecutor(max_workers=len(sample)) as pool:
        results = list(pool.map(lambda link: probe_link(session, link), sample))

    internal_set = set(internal)
    for link, ok in zip(sample, results):
        if ok:
            continue
        if link in internal_set:
            broken_internal.append(link)
        else:
            broken_external.append(link)

    logger.info("Probed %d link(s): %d broken", len(sample),
                len(broken_internal) + len(broken_external))
    return {"internal": broken_internal, "external": broken_external}


# ── Main class ─────────────────────────────────────────────────────────────────

class WebsiteAnalyzer:
    def __init__(self, url: str, session: requests.Session | None = None,
                 probe_session: requests.Session | None = None,
                 progress_callback=None):
        """
        Args:
            url:               Page to analyse; must be an absolute http(s) URL.
            session:           Optional requests.Session for the page fetch.
            probe_session:     Optional session for link probes; defaults to
                               `session` when one is given, otherwise a new
                               session capped at LINK_MAX_REDIRECTS.
            progress_callback: Optional callable(stage: str, detail: str | None).

        Raises:
            fetcher.InvalidUrl: if the URL is unusable (no network call is made).
        """
        self.url = validate_url(url)
        if probe_session is None:
            probe_session = session or new_session(cfg.LINK_MAX_REDIRECTS)
        self.session = session or new_session(cfg.PAGE_MAX_REDIRECTS)
        self.probe_session = probe_session
        self._cb = progress_callback or (lambda stage, detail=None: None)

    # ── Orchestrator ───────────────────────────────────────────────────────────

    def analyze(self) -> dict:
        """Fetch the page and run every check. Raises on any fetch failure."""
        self._cb("fetching", self.url)
        _, html = fetch(self.url, session=self.session)
        return self.analyze_html(html)

    def analyze_html(self, html: str) -> dict:
        """Run every check against already-fetched markup."""
        self._cb("parsing", f"{len(html)} characters")
        doc = Document(html)

        self._cb("checking", "SEO, accessibility, performance, headers, images")
        seo = check_seo(doc)
        accessibility = check_accessibility(doc)
        performance = check_performance(doc, html)
        headers = audit_headers(doc)
        images = audit_images(doc)
        scope = future_scope(doc)

        internal, external = collect_links(doc, self.url)
        self._cb("probing", f"{len(internal)} internal / {len(external)} external link(s)")
        broken = check_broken_links(self.probe_session, internal, external)

        overall = overall_score(seo["score"], accessibility["score"], performance["score"])
        self._cb("done", f"overall {overall} ({score_label(overall)})")

        return {
            "url": self.url,
            "title": doc.text("title") or "No title found",
            "metaDescription": doc.attr('meta[name="description"]', "content") or "No description found",
            "performance": performance,
            "seo": seo,
            "accessibility": accessibility,
            "brokenLinks": broken,
            "images": images,
            "headers": headers,
            "futureScope": scope,
            "overallScore": overall,
        }
