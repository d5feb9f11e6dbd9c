"""Settings from IRONLOG_* environment variables."""

from ironlog.config import Settings
from ironlog.normalize import DEFAULT_DATE_LOCALES, parse_export_date


def test_defaults() -> None:
    settings = Settings()
    assert settings.log_level == "INFO"
    assert settings.db_path.endswith("ironlog.db")
    assert [loc.name for loc in settings.date_locales] == [loc.name for loc in DEFAULT_DATE_LOCALES]


def test_environment_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("IRONLOG_DB_PATH", str(tmp_path / "other.db"))
    monkeypatch.setenv("IRONLOG_LOG_LEVEL", "DEBUG")
    settings = Settings()
    assert settings.db_path == str(tmp_path / "other.db")
    assert settings.log_level == "DEBUG"


def test_custom_date_locale(monkeypatch) -> None:
    months = [[m] for m in ["jan", "feb", "mär", "apr", "mai", "jun", "jul", "aug", "sep", "okt", "nov", "dez"]]
    monkeypatch.setenv(
        "IRONLOG_DATE_LOCALES",
        '[{"name": "de_DE", "months": ' + str(months).replace("'", '"') + "}]",
    )
    settings = Settings()
    assert [loc.name for loc in settings.date_locales] == ["de_DE"]
    parsed = parse_export_date("3 Mär 2025, 07:15", settings.date_locales)
    assert parsed is not None and parsed.month == 3
    assert parse_export_date("3 Mar 2025, 07:15", settings.date_locales) is None
