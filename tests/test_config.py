from gowheels.core.config import DEFAULT_ALLOWED_ORIGINS, Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    settings = Settings(_env_file=None)

    assert settings.ALLOWED_ORIGINS == DEFAULT_ALLOWED_ORIGINS
    assert settings.SMTP_PORT == 465
    assert settings.EMAIL_TIMEOUT_SECONDS == 10.0
    assert settings.EXPOSE_ERROR_DETAIL is False


def test_allowed_origins_from_comma_separated_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")

    assert Settings(_env_file=None).ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]


def test_allowed_origins_from_json_env(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", '["https://a.example"]')

    assert Settings(_env_file=None).ALLOWED_ORIGINS == ["https://a.example"]


def test_sender_defaults_to_smtp_username():
    settings = Settings(_env_file=None, SMTP_USERNAME="mailer@gowheels.test")
    assert settings.sender_address == "mailer@gowheels.test"

    settings.EMAIL_FROM = "bookings@gowheels.test"
    assert settings.sender_address == "bookings@gowheels.test"


def test_error_detail_is_opt_in(monkeypatch):
    monkeypatch.delenv("EXPOSE_ERROR_DETAIL", raising=False)

    assert Settings(_env_file=None).show_error_detail is False
    assert Settings(_env_file=None, ENVIRONMENT="development").show_error_detail is False
    assert Settings(_env_file=None, EXPOSE_ERROR_DETAIL=True).show_error_detail is True


def test_default_origins_match_browser_origin_form(monkeypatch):
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)

    for origin in Settings(_env_file=None).ALLOWED_ORIGINS:
        assert origin == origin.lower()
        assert origin.count("/") == 2


def test_allowed_origins_are_normalized(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://Goku-cmd-gokul.github.io/, http://LOCALHOST:5500")

    assert Settings(_env_file=None).ALLOWED_ORIGINS == ["https://goku-cmd-gokul.github.io", "http://localhost:5500"]
