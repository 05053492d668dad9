from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from ..db import get_db, query
from ..tmdb import TMDbClient

bp = Blueprint("public", __name__, url_prefix="/api")


@bp.get("/health")
def health():
    """Readiness check against the catalog database."""
    try:
        query("SELECT 1")
    except Exception as exc:
        current_app.logger.error(f"Health check failed: {exc}")
        return jsonify({"status": "unhealthy", "error": str(exc)}), 503
    return jsonify({"status": "healthy"})


@bp.post("/import-trending")
def import_trending():
    """Pull TMDb weekly trending movies/TV (?type=movie|tv|both&pages=N) into the catalog."""
    from etl.trending_import import TrendingImportService

    content_type = request.args.get("type", "both")
    try:
        pages = int(request.args.get("pages", 5))
    except (TypeError, ValueError):
        return jsonify({"error": "pages must be a whole number"}), 400

    try:
        client = TMDbClient(
            api_key=current_app.config.get("TMDB_API_KEY"),
            timeout=current_app.config.get("TMDB_TIMEOUT", 20),
        )
        service = TrendingImportService(current_app.config["SETTINGS"], client=client, conn=get_db())
        results = service.run(content_type=content_type, pages=pages)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.exception("/api/import-trending failed")
        return jsonify({"error": str(e)}), 500

    return jsonify({
        "success": True,
        "results": results,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
