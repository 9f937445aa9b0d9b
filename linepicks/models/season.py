from datetime import datetime, timezone

from linepicks import db


class Season(db.Model):
    __tablename__ = "seasons"

    id = db.Column(db.Integer, primary_key=True)
    year = db.Column(db.Integer, nullable=False, unique=True, index=True)
    name = db.Column(db.String(50), nullable=False)  # e.g., "2025 NFL Season"

    # Season dates
    start_date = db.Column(db.Date, nullable=False)
    regular_season_weeks = db.Column(db.Integer, default=18)
    playoff_weeks = db.Column(db.Integer, default=4)

    # Status
    is_active = db.Column(db.Boolean, default=False)
    # Manual override; when NULL the week is derived from start_date
    current_week = db.Column(db.Integer, nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (db.Index("idx_season_active", "is_active"),)

    def __repr__(self):
        return f"<Season {self.year}>"

    @staticmethod
    def get_current_season():
        """Get the currently active season"""
        return Season.query.filter_by(is_active=True).first()

    @staticmethod
    def create_season(year, start_date, regular_season_weeks=18, playoff_weeks=4):
        """Create a new season"""
        season = Season(
            year=year,
            name=f"{year} NFL Season",
            start_date=start_date,
            regular_season_weeks=regular_season_weeks,
            playoff_weeks=playoff_weeks,
        )
        db.session.add(season)
        return season

    def activate(self):
        """Activate this season (deactivates all others)"""
        Season.query.filter(Season.id != self.id).update({"is_active": False})
        self.is_active = True

    @property
    def total_weeks(self):
        return (self.regular_season_weeks or 0) + (self.playoff_weeks or 0)

    def is_playoff_week(self, week):
        """Check if a week is a playoff week"""
        return week > self.regular_season_weeks

    def get_current_week(self, today=None):
        """Week in progress on ``today`` (a date in the app timezone)"""
        if self.current_week:
            return self.current_week

        if today is None:
            from linepicks.utils.timezone_utils import get_current_time

            today = get_current_time().date()

        elapsed_days = (today - self.start_date).days
        week = elapsed_days // 7 + 1
        return max(1, min(week, self.total_weeks))

    def to_dict(self):
        """Convert season to dictionary for API responses"""
        return {
            "id": self.id,
            "year": self.year,
            "name": self.name,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "isActive": self.is_active,
            "currentWeek": self.get_current_week(),
            "regularSeasonWeeks": self.regular_season_weeks,
            "playoffWeeks": self.playoff_weeks,
        }
