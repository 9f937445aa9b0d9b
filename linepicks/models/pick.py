from datetime import datetime, timezone

from linepicks import db


class Pick(db.Model):
    __tablename__ = "picks"

    id = db.Column(db.Integer, primary_key=True)

    # Pick identification
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    season = db.Column(db.Integer, nullable=False)  # Season year, e.g. 2024
    week = db.Column(db.Integer, nullable=False)

    # Pick details, fixed at submission time
    event_id = db.Column(db.String(100), nullable=False)
    selection = db.Column(db.String(100), nullable=False)
    line = db.Column(db.Float, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    user = db.relationship("User", back_populates="picks")

    # Constraints and indexes
    __table_args__ = (
        # One pick per user per period. The database enforces it, so
        # concurrent submissions cannot both land.
        db.UniqueConstraint("user_id", "season", "week", name="unique_user_period_pick"),
        db.CheckConstraint("week >= 1", name="positive_week"),
        db.Index("idx_pick_user", "user_id"),
        db.Index("idx_pick_period", "season", "week"),
    )

    def __repr__(self):
        return f"<Pick user_id={self.user_id} season={self.season} week={self.week} selection={self.selection}>"

    @property
    def period(self):
        return self.season, self.week

    def to_dict(self, include_user=False):
        """Convert pick to dictionary for API responses"""
        data = {
            "id": self.id,
            "userId": self.user_id,
            "season": self.season,
            "week": self.week,
            "eventId": self.event_id,
            "team": self.selection,
            "line": self.line,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

        if include_user and self.user:
            data["user"] = {"id": self.user.id, "displayName": self.user.full_name}

        return data
