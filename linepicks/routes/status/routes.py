from flask import jsonify, request

from linepicks.login import request_token
from linepicks.routes.status import bp
from linepicks.services import get_pick_service


@bp.route("")
def status():
    """Login and pick status for a period: {loggedIn, hasPick}"""
    season = request.args.get("season", type=int)
    week = request.args.get("week", type=int)
    return jsonify(get_pick_service().status(request_token(), season, week))
