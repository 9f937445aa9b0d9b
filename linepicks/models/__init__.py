from linepicks import db  # noqa: F401 - imported for model imports

from .pick import Pick
from .season import Season
from .user import User

__all__ = [
    "User",
    "Pick",
    "Season",
]
