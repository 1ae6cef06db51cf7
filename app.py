"""
app.py — Flask application for WebCheck.

  POST /analyze   — fetches and audits one page; returns the full report JSON
  GET  /health    — static service metadata

Analysis is synchronous: the request waits for the fetch, the checks and the
link probes. Results are all-or-nothing; nothing is stored.
"""

import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request

from analyzer import WebsiteAnalyzer, score_label
from fetcher import InvalidUrl
import config as cfg

# ── Logging setup ──────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# ── Flask app ──────────────────────────────────────────────────────────────────
app = Flask(__name__)

GENERIC_FAILURE = "Failed to analyze website. Please check the URL and try again."


def _progress_logger(url: str):
    def _progress(stage: str, detail: str | None = None):
        logger.info("[%s] %s — %s", url, stage, detail or "")
    return _progress


# ── Routes ─────────────────────────────────────────────────────────────────────

@app.route("/analyze", methods=["POST"])
@app.route("/api/analyze", methods=["POST"])
def analyze():
    """
    Body JSON: { url: str }
    Returns:   the analysis report, or { error } with 400 / 500.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    url = data.get("url")

    if not url:
        return jsonify({"error": "URL is required"}), 400

    try:
        analyzer = WebsiteAnalyzer(url, progress_callback=_progress_logger(url))
    except InvalidUrl:
        logger.info("Rejected invalid URL: %r", url)
        return jsonify({"error": "Invalid URL format"}), 400

    try:
        result = analyzer.analyze()
    except Exception:
        logger.exception("Analysis failed for %s", url)
        return jsonify({"error": GENERIC_FAILURE}), 500

    logger.info("Analysis complete for %s: overall %d (%s)", result["url"],
                result["overallScore"], score_label(result["overallScore"]))
    return jsonify(result)


@app.route("/health")
@app.route("/api/health")
def health():
    """Static service metadata; no side effects."""
    return jsonify({
        "status": "ok",
        "message": "WebCheck API is running",
        "version": cfg.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "port": cfg.PORT,
        "host": cfg.HOST,
        "environment": cfg.ENVIRONMENT,
        "endpoints": {
            "analyze": "/analyze (POST)",
            "health": "/health (GET)",
        },
    })


# ── Dev server ─────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    # Development only; run under gunicorn elsewhere
    app.run(debug=False, host=cfg.HOST, port=cfg.PORT)
