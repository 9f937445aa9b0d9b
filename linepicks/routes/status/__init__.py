from flask import Blueprint

bp = Blueprint("status", __name__)

from linepicks.routes.status import routes  # noqa: F401, E402
