from flask import Blueprint

bp = Blueprint("picks", __name__)

from linepicks.routes.picks import routes  # noqa: F401, E402
