from habitrpg.config import Settings
from habitrpg.database.config import build_tortoise_config, get_tortoise_db_url


def test_cors_origins_accept_csv_and_json() -> None:
    settings = Settings(CORS_ORIGINS="https://a.example, https://b.example")
    assert settings.CORS_ORIGINS == ["https://a.example", "https://b.example"]

    settings = Settings(CORS_ORIGINS='["https://a.example"]')
    assert settings.CORS_ORIGINS == ["https://a.example"]

    assert Settings(CORS_ORIGINS="  ").CORS_ORIGINS == []


def test_database_url_priority() -> None:
    settings = Settings(DATABASE_URL="postgres://u:p@db:5432/app")
    assert settings.database_url == "postgresql://u:p@db:5432/app"

    settings = Settings(DATABASE_URL=None, ENVIRONMENT="development")
    assert settings.database_url == "sqlite://db.sqlite3"


def test_tortoise_url_uses_postgres_scheme() -> None:
    assert get_tortoise_db_url("postgresql://u:p@db/app") == "postgres://u:p@db/app"
    assert get_tortoise_db_url("sqlite://:memory:") == "sqlite://:memory:"

    tortoise_config = build_tortoise_config("postgresql://u:p@db/app")
    assert tortoise_config["connections"]["default"] == "postgres://u:p@db/app"
    assert tortoise_config["use_tz"] is True
    assert "aerich.models" in tortoise_config["apps"]["models"]["models"]
