"""
Pick Service

Resolves the caller from a bearer session token, works out the open period
from the schedule, and delegates storage to the pick ledger.
"""

import logging

from linepicks.errors import MissingParameters, Unauthenticated, ValidationFailed

logger = logging.getLogger(__name__)


class PickService:
    def __init__(self, ledger, token_issuer, schedule):
        self.ledger = ledger
        self.token_issuer = token_issuer
        self.schedule = schedule

    def _require_claim(self, token):
        claim = self.token_issuer.verify(token)
        if claim is None:
            raise Unauthenticated()
        return claim

    def submit_pick(self, token, event_id, selection, line):
        """
        Record the caller's pick for the current period.

        Raises:
            Unauthenticated: missing or invalid token
            NoActiveSeason: no season is active
            AlreadyPicked: the caller already picked this period
        """
        claim = self._require_claim(token)
        season, week = self.schedule.current_period()

        pick = self.ledger.submit(
            claim.subject_id, season, week, event_id, selection, line
        )
        logger.info(
            f"Pick {pick.id} submitted by account {claim.subject_id} for {season} week {week}"
        )
        return pick

    def status(self, token, season=None, week=None):
        """
        Report whether the caller is logged in and has picked the period.

        Anonymous callers get ``loggedIn: False`` regardless of parameters.

        Raises:
            MissingParameters: authenticated caller without season and week
        """
        claim = self.token_issuer.verify(token)
        if claim is None:
            return {"loggedIn": False, "hasPick": False}

        if season is None or week is None:
            raise MissingParameters()

        return {
            "loggedIn": True,
            "hasPick": self.ledger.exists(claim.subject_id, season, week),
        }

    def picks_for(self, token):
        claim = self._require_claim(token)
        return self.ledger.list_for_owner(claim.subject_id)

    def summary(self, season=None, week=None):
        """All picks for a period; defaults to the current period"""
        if season is None and week is None:
            season, week = self.schedule.current_period()
        elif season is None or week is None:
            raise MissingParameters()

        if week < 1:
            raise ValidationFailed("week must be at least 1")

        return [pick.to_dict(include_user=True) for pick in self.ledger.list_for_period(season, week)]
