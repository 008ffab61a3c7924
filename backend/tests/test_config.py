from plantsafe.core.config import Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "AI_PROVIDER", "MAX_IMAGE_BYTES", "GEMINI_MODEL"):
        monkeypatch.delenv(name, raising=False)

    s = Settings()

    assert s.ai_provider == "gemini"
    assert s.gemini_model == "gemini-1.5-flash"
    assert s.max_image_bytes == 10 * 1024 * 1024
    assert s.max_request_bytes > s.max_image_bytes
    assert s.expose_error_details is False


def test_cors_origins_csv(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.example, https://b.example ,")
    s = Settings()
    assert s.cors_allow_origins == ["https://a.example", "https://b.example"]


def test_cors_origins_json_array(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", '["https://a.example", "https://b.example"]')
    assert Settings().cors_allow_origins == ["https://a.example", "https://b.example"]


def test_cors_defaults(monkeypatch):
    for name in ("CORS_ALLOW_ORIGINS", "CORS_ALLOW_METHODS", "CORS_ALLOW_HEADERS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings()

    assert s.cors_allow_origins == []
    assert s.cors_allow_methods == ["POST", "OPTIONS"]
    assert s.cors_allow_headers == ["Content-Type", "Accept"]


def test_cors_lists_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_METHODS", "POST")
    monkeypatch.setenv("CORS_ALLOW_HEADERS", "Content-Type, X-Client")
    s = Settings()
    assert s.cors_allow_methods == ["POST"]
    assert s.cors_allow_headers == ["Content-Type", "X-Client"]


def test_request_ceiling_allows_line_wrapped_base64(monkeypatch):
    monkeypatch.delenv("MAX_IMAGE_BYTES", raising=False)
    s = Settings()

    encoded_len = 4 * -(-s.max_image_bytes // 3)
    lines = -(-encoded_len // 76)
    # CRLF after every 76 columns, each break JSON-escaped to four characters.
    body_len = len('{"imageData": ""}') + encoded_len + 4 * lines

    assert body_len <= s.max_request_bytes


def test_google_api_key_alias(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("GOOGLE_API_KEY", "from-google")
    assert Settings().gemini_api_key == "from-google"


def test_provider_name_normalized(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", " Mock ")
    assert Settings().ai_provider == "mock"


def test_validate_required_config_missing_key(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "gemini")
    monkeypatch.setenv("GEMINI_API_KEY", "")
    monkeypatch.setenv("GOOGLE_API_KEY", "")

    errors = Settings().validate_required_config()

    assert any("GEMINI_API_KEY" in e for e in errors)


def test_validate_required_config_ok_for_mock(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "mock")
    assert Settings().validate_required_config() == []


def test_validate_required_config_rejects_bad_limits(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "mock")
    monkeypatch.setenv("AI_TIMEOUT_SECONDS", "0")
    monkeypatch.setenv("MAX_IMAGE_BYTES", "-1")

    errors = Settings().validate_required_config()

    assert "AI_TIMEOUT_SECONDS must be positive" in errors
    assert "MAX_IMAGE_BYTES must be positive" in errors


def test_validate_required_config_unknown_provider(monkeypatch):
    monkeypatch.setenv("AI_PROVIDER", "claude")
    errors = Settings().validate_required_config()
    assert any("AI_PROVIDER" in e for e in errors)


def test_production_flag(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "production")
    assert Settings().is_production is True
    monkeypatch.setenv("ENVIRONMENT", "test")
    assert Settings().is_production is False


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
