from datetime import datetime, timezone

from flask import jsonify

from linepicks import limiter
from linepicks.routes.main import bp
from linepicks.services import ScheduleService


@bp.route("/health")
@limiter.exempt
def health():
    """Health check endpoint - exempt from rate limiting for monitoring systems"""
    return jsonify(
        {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
    )


@bp.route("/seasons/current")
def current_season():
    """Get current active season and its open week"""
    season = ScheduleService().current_season()
    return jsonify(season.to_dict())
