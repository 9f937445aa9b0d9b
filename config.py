import os
import secrets
import warnings

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))


class Config:
    # Generate secure keys if not provided (with warnings)
    _secret_key = os.environ.get("SECRET_KEY")

    if not _secret_key:
        _secret_key = secrets.token_urlsafe(32)
        warnings.warn(
            "🔐 SECRET_KEY not set! Using auto-generated key. "
            "Issued session tokens will stop verifying on app restart. "
            "Run 'python3 generate_secrets.py' to generate secure keys.",
            UserWarning,
        )

    SECRET_KEY = _secret_key

    # Session token signing. Falls back to SECRET_KEY when unset.
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY")
    JWT_ALGORITHM = "HS256"
    SESSION_TOKEN_TTL = int(os.environ.get("SESSION_TOKEN_TTL") or 86400)  # seconds

    # Password recovery
    RESET_TOKEN_TTL = int(os.environ.get("RESET_TOKEN_TTL") or 3600)  # seconds
    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:4200")
    RESET_PASSWORD_PATH = os.environ.get("RESET_PASSWORD_PATH", "/reset-password")

    # Argon2id cost parameters (argon2-cffi defaults)
    ARGON2_TIME_COST = int(os.environ.get("ARGON2_TIME_COST") or 3)
    ARGON2_MEMORY_COST = int(os.environ.get("ARGON2_MEMORY_COST") or 65536)  # KiB
    ARGON2_PARALLELISM = int(os.environ.get("ARGON2_PARALLELISM") or 4)

    # Database configuration - built from environment at initialization
    def __init__(self):
        """Initialize configuration with dynamic database URI"""
        self.SQLALCHEMY_DATABASE_URI = self._build_database_uri()

    def _build_database_uri(self):
        """Build database URI from environment variables"""
        database_url = os.environ.get("DATABASE_URL")
        if database_url:
            # Normalize legacy postgres:// scheme to the psycopg driver
            if database_url.startswith("postgres://"):
                database_url = database_url.replace(
                    "postgres://", "postgresql+psycopg://", 1
                )
            return database_url

        if os.environ.get("DB_HOST"):
            db_host = os.environ.get("DB_HOST")
            db_port = os.environ.get("DB_PORT") or "5432"
            db_name = os.environ.get("DB_NAME") or "linepicks"
            db_user = os.environ.get("DB_USER") or "linepicks"
            db_password = os.environ.get("DB_PASSWORD") or "linepicks"

            return f"postgresql+psycopg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"
        else:
            # Default to SQLite for development
            return "sqlite:///" + os.path.join(basedir, "linepicks.db")

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Email configuration
    MAIL_SERVER = os.environ.get("MAIL_SERVER")
    MAIL_PORT = int(os.environ.get("MAIL_PORT") or 587)
    MAIL_USE_TLS = os.environ.get("MAIL_USE_TLS", "true").lower() in ["true", "on", "1"]
    MAIL_USERNAME = os.environ.get("MAIL_USERNAME")
    MAIL_PASSWORD = os.environ.get("MAIL_PASSWORD")

    FROM_EMAIL = os.environ.get("FROM_EMAIL") or os.environ.get("MAIL_USERNAME")
    FROM_NAME = os.environ.get("FROM_NAME", "LinePicks")

    # Application settings
    TIMEZONE = os.environ.get("TIMEZONE", "UTC")  # Default to UTC if not specified

    # Rate limiting
    RATELIMIT_ENABLED = os.environ.get("RATELIMIT_ENABLED", "True").lower() == "true"
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")

    # Logging configuration
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_TO_CONSOLE = os.environ.get("LOG_TO_CONSOLE", "True").lower() == "true"
    LOG_TO_FILE = os.environ.get("LOG_TO_FILE", "True").lower() == "true"
    LOG_DIR = os.environ.get("LOG_DIR", "logs")

    # Environment detection
    FLASK_ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = FLASK_ENV == "development"
    TESTING = False


class DevelopmentConfig(Config):
    """Development configuration with helpful defaults"""

    DEBUG = True
    SQLALCHEMY_ECHO = os.environ.get("SQLALCHEMY_ECHO", "False").lower() == "true"


class ProductionConfig(Config):
    """Production configuration with security focus"""

    DEBUG = False

    # In production, require explicit environment variables
    def __init__(self):
        super().__init__()  # Call parent __init__ to build database URI

        if not os.environ.get("SECRET_KEY"):
            warnings.warn(
                "🚨 PRODUCTION WARNING: SECRET_KEY not explicitly set! "
                "Using auto-generated key is not recommended for production.",
                UserWarning,
            )
        if not os.environ.get("JWT_SECRET_KEY"):
            warnings.warn(
                "🚨 PRODUCTION WARNING: JWT_SECRET_KEY not explicitly set! "
                "Session tokens will be signed with SECRET_KEY.",
                UserWarning,
            )


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = "test-jwt-secret-key-for-testing-only"

    # Cheap hashing keeps the suite fast
    ARGON2_TIME_COST = 1
    ARGON2_MEMORY_COST = 1024
    ARGON2_PARALLELISM = 1

    RATELIMIT_ENABLED = False
    LOGIN_DISABLED = False
    LOG_TO_FILE = False
    LOG_LEVEL = "WARNING"

    MAIL_USERNAME = None
    MAIL_PASSWORD = None

    def _build_database_uri(self):
        return os.environ.get("TEST_DATABASE_URL", "sqlite:///:memory:")


# Configuration mapping
config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
