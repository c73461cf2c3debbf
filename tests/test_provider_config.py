from edgerelay.llm.provider_config import (
    DEFAULT_MODEL,
    DEFAULT_PROMPT,
    DEFAULT_TIMEOUT_SECONDS,
    RelayConfig,
    load_config,
)


def test_load_config_reads_credentials_from_mapping():
    config = load_config({"CLOUDFLARE_ACCOUNT_ID": "acct", "CLOUDFLARE_API_TOKEN": "tok"})
    assert config.account_id == "acct"
    assert config.api_token == "tok"
    assert config.model == DEFAULT_MODEL
    assert config.default_prompt == DEFAULT_PROMPT
    assert config.words_per_frame == 3


def test_blank_values_count_as_absent():
    config = load_config({"CLOUDFLARE_ACCOUNT_ID": "   ", "CLOUDFLARE_API_TOKEN": ""})
    assert config.account_id is None
    assert config.api_token is None


def test_invalid_timeout_falls_back_to_default():
    assert load_config({"RELAY_TIMEOUT_SECONDS": "soon"}).timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert load_config({"RELAY_TIMEOUT_SECONDS": "-1"}).timeout_seconds == DEFAULT_TIMEOUT_SECONDS
    assert load_config({"RELAY_TIMEOUT_SECONDS": "2.5"}).timeout_seconds == 2.5


def test_endpoint_template_keeps_account_placeholder():
    config = RelayConfig(api_base="https://example.test/client/v4/")
    assert config.endpoint_template == (
        "https://example.test/client/v4/accounts/{account_id}/ai/run/@cf/meta/llama-3.1-8b-instruct"
    )


def test_load_config_from_process_environment(monkeypatch):
    monkeypatch.setenv("CLOUDFLARE_ACCOUNT_ID", "env-acct")
    monkeypatch.setenv("CLOUDFLARE_API_TOKEN", "env-tok")
    monkeypatch.setenv("RELAY_DEFAULT_PROMPT", "Say hi")
    config = load_config()
    assert config.account_id == "env-acct"
    assert config.default_prompt == "Say hi"
