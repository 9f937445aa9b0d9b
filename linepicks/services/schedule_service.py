import logging

from linepicks.errors import NoActiveSeason
from linepicks.models import Season

logger = logging.getLogger(__name__)


class ScheduleService:
    """Answers which scoring period is open right now"""

    def current_season(self):
        season = Season.get_current_season()
        if season is None:
            raise NoActiveSeason()
        return season

    def current_period(self, today=None):
        """Return (season_year, week) for the active season"""
        season = self.current_season()
        return season.year, season.get_current_week(today)
