from imagegen.config import Settings, key_env_name, load_adapter_config


def _settings(monkeypatch, **env):
    for k in ("IMAGE_PROVIDER", "GOOGLE_API_KEY", "DEEPSEEK_API_KEY", "OPENROUTER_API_KEY", "IMAGES_HTTP_BASE_URL", "IMAGES_HTTP_TIMEOUT_SEC"):
        monkeypatch.delenv(k, raising=False)
    for k, v in env.items():
        monkeypatch.setenv(k, v)
    return Settings(_env_file=None)


def test_google_provider_reads_google_key(monkeypatch):
    s = _settings(monkeypatch, IMAGE_PROVIDER="google_imagen", GOOGLE_API_KEY=" g-key ", OPENROUTER_API_KEY="o-key")
    cfg = load_adapter_config(s)
    assert cfg.provider == "google_imagen"
    assert cfg.api_key == "g-key"
    assert cfg.timeout is None


def test_openrouter_provider_reads_its_own_key_and_chat_model(monkeypatch):
    s = _settings(
        monkeypatch,
        IMAGE_PROVIDER="openrouter_chat",
        GOOGLE_API_KEY="g-key",
        OPENROUTER_API_KEY="o-key",
        IMAGES_CHAT_MODEL="some/image-model",
    )
    cfg = load_adapter_config(s)
    assert cfg.api_key == "o-key"
    assert cfg.model == "some/image-model"


def test_missing_key_resolves_to_empty(monkeypatch):
    cfg = load_adapter_config(_settings(monkeypatch, IMAGE_PROVIDER="openai_images"))
    assert cfg.api_key == ""
    assert key_env_name(cfg.provider) == "DEEPSEEK_API_KEY"


def test_base_url_and_timeout_are_normalized(monkeypatch):
    s = _settings(
        monkeypatch,
        IMAGE_PROVIDER="openai_images",
        DEEPSEEK_API_KEY="d-key",
        IMAGES_HTTP_BASE_URL="http://images.local/v1/images/generations/",
        IMAGES_HTTP_TIMEOUT_SEC="0",
    )
    cfg = load_adapter_config(s)
    assert cfg.base_url == "http://images.local/v1/images/generations"
    assert cfg.timeout is None


def test_positive_timeout_is_kept(monkeypatch):
    s = _settings(monkeypatch, IMAGE_PROVIDER="google_imagen", IMAGES_HTTP_TIMEOUT_SEC="45")
    assert load_adapter_config(s).timeout == 45.0
