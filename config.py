import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    APP_NAME = data.get("APP_NAME", "Landson")
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    DB_CREATE_ALL = bool(data.get("DB_CREATE_ALL", True))
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    CACHE_BACKEND = data.get("CACHE_BACKEND", "redis")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Tokens
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ISSUER = data.get("JWT_ISSUER", "landson-api")
    JWT_AUDIENCE = data.get("JWT_AUDIENCE", "landson-client")
    JWT_EXPIRATION = data.get("JWT_EXPIRATION", "15m")
    JWT_REFRESH_EXPIRATION = data.get("JWT_REFRESH_EXPIRATION", "7d")
    JWT_REFRESH_ROTATION = bool(data.get("JWT_REFRESH_ROTATION", True))

    # Sessions
    SESSION_DURATION_SECONDS = int(data.get("SESSION_DURATION_SECONDS", 7 * 24 * 60 * 60))
    MAX_ACTIVE_SESSIONS = int(data.get("MAX_ACTIVE_SESSIONS", 5))
    ENFORCE_MAX_SESSIONS = bool(data.get("ENFORCE_MAX_SESSIONS", False))
    SESSION_CLEANUP_INTERVAL_SECONDS = int(data.get("SESSION_CLEANUP_INTERVAL_SECONDS", 3600))

    # Verification
    OTP_LENGTH = int(data.get("OTP_LENGTH", 6))
    PHONE_VERIFICATION_EXPIRATION = int(data.get("PHONE_VERIFICATION_EXPIRATION", 300))
    EMAIL_VERIFICATION_EXPIRATION = int(data.get("EMAIL_VERIFICATION_EXPIRATION", 300))
    PASSWORD_RESET_EXPIRATION = int(data.get("PASSWORD_RESET_EXPIRATION", 300))
    OTP_RESEND_COOLDOWN_SECONDS = int(data.get("OTP_RESEND_COOLDOWN_SECONDS", 60))
    VERIFICATION_MAX_ATTEMPTS = int(data.get("VERIFICATION_MAX_ATTEMPTS", 3))
    PASSWORD_MIN_LENGTH = int(data.get("PASSWORD_MIN_LENGTH", 8))

    # Login monitoring
    LOGIN_MAX_ATTEMPTS = int(data.get("LOGIN_MAX_ATTEMPTS", 5))
    LOGIN_WINDOW_SECONDS = int(data.get("LOGIN_WINDOW_SECONDS", 300))
    SUSPICIOUS_LOOKBACK_DAYS = int(data.get("SUSPICIOUS_LOOKBACK_DAYS", 30))
    SUSPICIOUS_RECENT_LOGINS = int(data.get("SUSPICIOUS_RECENT_LOGINS", 10))

    # Roles
    SEED_ROLES = bool(data.get("SEED_ROLES", True))

    # Notifications
    NOTIFIER_BACKEND = data.get("NOTIFIER_BACKEND", "log")
    NOTIFIER_RETRY_ATTEMPTS = int(data.get("NOTIFIER_RETRY_ATTEMPTS", 3))
    NOTIFIER_RETRY_DELAY_SECONDS = float(data.get("NOTIFIER_RETRY_DELAY_SECONDS", 1.0))
    SMTP_HOST = data.get("SMTP_HOST", "localhost")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USER = data.get("SMTP_USER", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_USE_TLS = bool(data.get("SMTP_USE_TLS", True))
    MAIL_FROM = data.get("MAIL_FROM", "no-reply@landson.local")
    TWILIO_ACCOUNT_SID = data.get("TWILIO_ACCOUNT_SID", "")
    TWILIO_AUTH_TOKEN = data.get("TWILIO_AUTH_TOKEN", "")
    TWILIO_PHONE_NUMBER = data.get("TWILIO_PHONE_NUMBER", "")
