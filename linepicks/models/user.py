import html
from datetime import datetime, timezone

from flask_login import UserMixin

from linepicks import db
from linepicks.utils.timezone_utils import ensure_utc


def normalize_email(email):
    """Canonical form of an account identity"""
    return (email or "").strip().lower()


def sanitize_display_name(display_name):
    """Strip and escape a display name; blank becomes None"""
    if display_name is None:
        return None
    cleaned = display_name.strip()
    return html.escape(cleaned, quote=False) if cleaned else None


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    # Profile information
    display_name = db.Column(db.String(100))

    # Password reset
    reset_token = db.Column(db.String(100), nullable=True)
    reset_token_expiry = db.Column(db.DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    last_login = db.Column(db.DateTime)

    # Relationships
    picks = db.relationship("Pick", back_populates="user", lazy="dynamic")

    # Database indexes and constraints
    __table_args__ = (
        db.CheckConstraint(
            "(reset_token IS NULL AND reset_token_expiry IS NULL) OR "
            "(reset_token IS NOT NULL AND reset_token_expiry IS NOT NULL)",
            name="reset_fields_paired",
        ),
        db.Index("idx_user_last_login", "last_login"),
        db.Index("idx_user_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<User {self.email}>"

    @property
    def full_name(self):
        """Return display name or email"""
        return self.display_name or self.email

    @property
    def has_pending_reset(self):
        """True while an unexpired reset token is stored"""
        if not self.reset_token or not self.reset_token_expiry:
            return False
        # SQLite hands back naive datetimes; they are stored in UTC
        return ensure_utc(self.reset_token_expiry) > datetime.now(timezone.utc)

    def to_dict(self):
        """Convert user to dictionary for API responses"""
        return {
            "id": self.id,
            "email": self.email,
            "displayName": self.display_name,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
        }
