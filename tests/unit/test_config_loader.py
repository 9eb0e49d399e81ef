"""
Unit tests for settings and environment loading
"""
from poi_catalog.config import Environment, Settings
from poi_catalog.config.loader import ConfigLoader
from poi_catalog.config.settings import DatabaseSettings, SecuritySettings


def test_nested_settings_from_environment(monkeypatch):
    monkeypatch.setenv("QUERY_UNBOUNDED_RESULT_LIMIT", "25")
    monkeypatch.setenv("QUERY_DEFAULT_USER_ID", "kiosk")
    monkeypatch.setenv("IMPORT_MAX_REPORTED_ERRORS", "2")
    settings = Settings()
    assert settings.query.unbounded_result_limit == 25
    assert settings.query.default_user_id == "kiosk"
    assert settings.imports.max_reported_errors == 2


def test_sqlite_path():
    assert DatabaseSettings(url="sqlite:///./data/poi.db").sqlite_path.name == "poi.db"
    assert DatabaseSettings(url="sqlite://").sqlite_path is None
    assert DatabaseSettings(url="sqlite:///:memory:").sqlite_path is None
    assert DatabaseSettings(url="postgresql://u:p@localhost/poi").sqlite_path is None


def test_cors_origins_from_comma_list():
    security = SecuritySettings(cors_origins="http://localhost:5173, https://maps.example")
    assert security.cors_origins == ["http://localhost:5173", "https://maps.example"]
    assert Settings(security=security).get_cors_config()["allow_origins"] == security.cors_origins


def test_load_environment_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = ConfigLoader.load_environment_config("staging")
    assert settings.environment == Environment.STAGING
    assert not settings.is_production()


def test_load_environment_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env.production").write_text(
        "PORT=8080\nAPP_NAME=POI Prod\nQUERY_DEFAULT_USER_ID=kiosk\n", encoding="utf-8"
    )
    settings = ConfigLoader.load_environment_config("production")
    assert settings.port == 8080
    assert settings.app_name == "POI Prod"
    assert settings.query.default_user_id == "kiosk"
    assert settings.is_production()


def test_sample_env_file_and_discovery(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = ConfigLoader.create_sample_env_file("development")
    content = (tmp_path / path).read_text(encoding="utf-8")
    assert "DATABASE_URL=" in content
    assert "QUERY_UNBOUNDED_RESULT_LIMIT=" in content
    (tmp_path / ".env.testing").write_text("DEBUG=true\n", encoding="utf-8")
    assert ConfigLoader.get_available_environments() == ["testing"]
    assert ConfigLoader.validate_environment_config("testing")
    assert not ConfigLoader.validate_environment_config("nowhere")
