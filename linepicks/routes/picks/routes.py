from flask import jsonify, request

from linepicks import limiter
from linepicks.forms import validate_or_raise
from linepicks.forms.picks import PickForm
from linepicks.login import request_token
from linepicks.routes.picks import bp
from linepicks.services import get_pick_service


@bp.route("", methods=["POST"])
@limiter.limit("30 per minute")
def submit_pick():
    """Submit the caller's single pick for the current week"""
    form = validate_or_raise(PickForm())

    pick = get_pick_service().submit_pick(
        request_token(), form.event_id.data.strip(), form.chosen_side, form.line.data
    )
    return jsonify({"id": pick.id, "season": pick.season, "week": pick.week}), 201


@bp.route("/mine")
def my_picks():
    """All of the caller's picks in submission order"""
    picks = get_pick_service().picks_for(request_token())
    return jsonify([pick.to_dict() for pick in picks])


@bp.route("/all")
def all_picks():
    """Everyone's picks for a week (default: the current week)"""
    season = request.args.get("season", type=int)
    week = request.args.get("week", type=int)
    return jsonify(get_pick_service().summary(season, week))
