from flask import Blueprint, Response, current_app, jsonify, request

from ..db import get_db
from ..sitemaps import SitemapGenerator, resolve_sitemap_type
from ..store import SQLiteContentStore
from ..tmdb import TMDbClient

bp = Blueprint("sitemaps", __name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}
CACHE_CONTROL = "public, max-age=3600"


@bp.after_request
def add_cors_headers(resp):
    resp.headers.update(CORS_HEADERS)
    return resp


def _render(kind: str):
    try:
        # Fails fast on a missing API key, whatever sitemap was asked for
        tmdb = TMDbClient(
            api_key=current_app.config.get("TMDB_API_KEY"),
            timeout=current_app.config.get("TMDB_TIMEOUT", 20),
        )
        generator = SitemapGenerator(
            current_app.config["SITEMAP"],
            store=SQLiteContentStore(get_db()),
            tmdb=tmdb,
        )
        current_app.logger.info(f"Generating sitemap type: {kind}")
        xml = generator.generate(kind)
    except Exception as e:
        current_app.logger.exception("Error generating sitemap")
        return jsonify({"error": "Failed to generate sitemap", "message": str(e)}), 500

    resp = Response(xml, content_type="application/xml")
    resp.headers["Cache-Control"] = CACHE_CONTROL
    return resp


@bp.get("/sitemap")
def sitemap():
    """Single entry point: ?type=main|movies|tvshows|people|index."""
    return _render(resolve_sitemap_type(request.args.get("type")))


@bp.get("/sitemap.xml")
def sitemap_index():
    return _render("index")


@bp.get("/sitemap-<kind>.xml")
def sitemap_file(kind: str):
    return _render(resolve_sitemap_type(kind))
