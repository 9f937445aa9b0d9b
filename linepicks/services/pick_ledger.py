"""
Pick Ledger

Durable record of one pick per (owner, season, week). Submission is a single
INSERT and the ``unique_user_period_pick`` constraint decides which of several
concurrent submissions wins; there is no existence check before
the write.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload

from linepicks import db
from linepicks.errors import AlreadyPicked
from linepicks.models import Pick

logger = logging.getLogger(__name__)


class PickLedger:
    """Append-only pick storage; the only writer of ``Pick`` rows"""

    def exists(self, owner, season, week):
        query = db.session.query(Pick.id).filter_by(user_id=owner, season=season, week=week)
        return db.session.query(query.exists()).scalar()

    def submit(self, owner, season, week, event_id, selection, line):
        """
        Record a pick for the period.

        Raises:
            AlreadyPicked: the owner already holds a pick for (season, week)
            IntegrityError: any other constraint rejected the row
        """
        pick = Pick(
            user_id=owner,
            season=season,
            week=week,
            event_id=event_id,
            selection=selection,
            line=line,
        )
        db.session.add(pick)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            # Only the period constraint means "already picked"
            if self.exists(owner, season, week):
                logger.info(f"Rejected duplicate pick for user {owner}, season {season} week {week}")
                raise AlreadyPicked()
            logger.error(f"Pick for user {owner}, season {season} week {week} violated a constraint")
            raise

        logger.debug(f"Recorded pick {pick.id} for user {owner}, season {season} week {week}")
        return pick

    def list_for_owner(self, owner):
        return (
            Pick.query.filter_by(user_id=owner)
            .order_by(Pick.created_at, Pick.id)
            .all()
        )

    def list_for_period(self, season, week):
        return (
            Pick.query.options(joinedload(Pick.user))
            .filter_by(season=season, week=week)
            .order_by(Pick.created_at, Pick.id)
            .all()
        )
