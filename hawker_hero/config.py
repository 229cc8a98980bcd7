import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SECRET_KEY = "change-me"


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///hawker_hero.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # defaults to <package>/static/images
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER")
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5MB image limit

    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    SESSION_COOKIE_NAME = "hawker_hero_session"
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "0") == "1"

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
