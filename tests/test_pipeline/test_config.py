"""
Tests for configuration loading
"""

import pytest

from reviewbench.config import DEFAULT_ARBITER, ModelConfig, load_settings
from reviewbench.errors import ConfigError

CONFIG_YAML = """
models:
  - name: Local
    provider: litellm
    model_id: ollama/qwen2.5-coder:7b
  - name: Judge
    provider: anthropic
    model_id: claude-sonnet-4-5
    temperature: 0
    pricing:
      input_per_1m: 3
      output_per_1m: 15
arbiter: Judge
paths:
  test_files: fixtures
  output: out
run:
  request_delay_ms: 10
  fixture_delay_ms: 20
  max_attempts: 4
test_files:
  - a.vhd
"""

ENV_VARS = [
    "REQUEST_DELAY_MS",
    "FIXTURE_DELAY_MS",
    "TIMEOUT_MS",
    "REVIEWBENCH_ARBITER",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
    "LLM_API_KEY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return str(path)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults_without_file(self, tmp_path):
        settings = load_settings(str(tmp_path / "missing.yaml"))
        assert settings.arbiter == DEFAULT_ARBITER
        assert settings.arbiter_model().provider == "anthropic"
        assert [m.name for m in settings.models] == [
            "GPT-5 Nano",
            "Claude Sonnet 4.5",
            "Gemini 2.5 Flash Lite",
        ]
        assert settings.fixture_delay_ms == 1000
        assert settings.retry.max_attempts == 3

    def test_yaml_values(self, config_file):
        settings = load_settings(config_file)
        assert [m.name for m in settings.models] == ["Local", "Judge"]
        assert settings.arbiter_model().name == "Judge"
        assert settings.test_files_dir == "fixtures"
        assert str(settings.responses_dir).replace("\\", "/") == "out/responses"
        assert settings.request_delay_ms == 10
        assert settings.fixture_delay_ms == 20
        assert settings.retry.max_attempts == 4
        assert settings.test_files == ["a.vhd"]

    def test_pricing(self, config_file):
        settings = load_settings(config_file)
        assert settings.pricing_for("Judge").output_per_1m == 15.0
        assert settings.pricing_for("Local") is None
        assert settings.pricing_for("Unknown") is None

    def test_env_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv("FIXTURE_DELAY_MS", "0")
        monkeypatch.setenv("REVIEWBENCH_ARBITER", "Local")
        monkeypatch.setenv("GEMINI_API_KEY", "g-key")
        settings = load_settings(config_file)
        assert settings.fixture_delay_ms == 0
        assert settings.arbiter == "Local"
        assert settings.api_key_for("google") == "g-key"

    def test_bad_env_int(self, config_file, monkeypatch):
        monkeypatch.setenv("TIMEOUT_MS", "soon")
        with pytest.raises(ConfigError):
            load_settings(config_file)

    def test_missing_arbiter(self, config_file, monkeypatch):
        monkeypatch.setenv("REVIEWBENCH_ARBITER", "Nobody")
        with pytest.raises(ConfigError):
            load_settings(config_file).arbiter_model()


class TestModelConfig:
    """Tests for ModelConfig.from_dict."""

    def test_camel_case_keys(self):
        model = ModelConfig.from_dict(
            {"name": "G", "provider": "google", "modelId": "gemini-2.5-flash-lite",
             "pricing": {"inputPer1M": 0.1, "outputPer1M": 0.4}}
        )
        assert model.model_id == "gemini-2.5-flash-lite"
        assert model.pricing.input_per_1m == pytest.approx(0.1)
        assert model.max_tokens == 16000

    def test_unknown_provider(self):
        with pytest.raises(ConfigError):
            ModelConfig.from_dict({"name": "X", "provider": "mystery", "model_id": "x"})
