import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_SCHEMA = False

    # Bearer tokens are verified when present; REQUIRE_AUTH makes them mandatory
    REQUIRE_AUTH = _env_flag("REQUIRE_AUTH", False)

    DEPLOYMENT_HISTORY_LIMIT = int(os.getenv("DEPLOYMENT_HISTORY_LIMIT", "50"))
    EXPORT_COMPRESSION_LEVEL = int(os.getenv("EXPORT_COMPRESSION_LEVEL", "9"))

    ENHANCE_API_URL = os.getenv("ENHANCE_API_URL", "http://localhost:5173/api/chat")
    ENHANCE_TIMEOUT = float(os.getenv("ENHANCE_TIMEOUT", "120"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    AUTO_CREATE_SCHEMA = True
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///sitebuilder-dev.db")


class TestingConfig(BaseConfig):
    TESTING = True
    AUTO_CREATE_SCHEMA = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    REQUIRE_AUTH = False
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")
    REQUIRE_AUTH = _env_flag("REQUIRE_AUTH", True)


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig
}
