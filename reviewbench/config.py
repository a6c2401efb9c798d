"""
Benchmark Configuration

Model definitions, pricing and run settings. A single Settings object is
built at startup (YAML file, then environment overrides) and passed to
every component that needs it.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .llm.retry import RetryPolicy

MAX_TOKENS = 16000
DEFAULT_CONFIG_PATH = "config/config.yaml"
DEFAULT_ARBITER = "Claude Sonnet 4.5"

PROVIDERS = ("openai", "anthropic", "google", "litellm")


@dataclass(frozen=True)
class ModelPricing:
    """USD price per one million tokens."""

    input_per_1m: float
    output_per_1m: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelPricing":
        return cls(
            input_per_1m=float(data.get("input_per_1m", data.get("inputPer1M", 0.0))),
            output_per_1m=float(data.get("output_per_1m", data.get("outputPer1M", 0.0))),
        )


@dataclass
class ModelConfig:
    """A model taking part in the benchmark, as candidate or arbiter."""

    name: str
    provider: str
    model_id: str
    max_tokens: int = MAX_TOKENS
    temperature: Optional[float] = None
    seed: Optional[int] = None
    pricing: Optional[ModelPricing] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelConfig":
        provider = data.get("provider", "litellm")
        if provider not in PROVIDERS:
            raise ConfigError(f"Unsupported provider: {provider}")
        pricing = data.get("pricing")
        return cls(
            name=data["name"],
            provider=provider,
            model_id=data.get("model_id") or data["modelId"],
            max_tokens=int(data.get("max_tokens", MAX_TOKENS)),
            temperature=data.get("temperature"),
            seed=data.get("seed"),
            pricing=ModelPricing.from_dict(pricing) if pricing else None,
        )


DEFAULT_MODELS = [
    ModelConfig(name="GPT-5 Nano", provider="openai", model_id="gpt-5-nano", seed=42),
    ModelConfig(
        name="Claude Sonnet 4.5",
        provider="anthropic",
        model_id="claude-sonnet-4-5",
        temperature=0.0,
    ),
    ModelConfig(
        name="Gemini 2.5 Flash Lite",
        provider="google",
        model_id="gemini-2.5-flash-lite",
        temperature=0.0,
    ),
]


@dataclass
class Settings:
    """Run-wide settings shared by the analysis and evaluation phases."""

    models: List[ModelConfig] = field(default_factory=lambda: list(DEFAULT_MODELS))
    arbiter: str = DEFAULT_ARBITER
    test_files_dir: str = "test-files"
    test_files: List[str] = field(default_factory=list)
    output_dir: str = "results"
    request_delay_ms: int = 1000
    fixture_delay_ms: int = 1000
    timeout_ms: int = 30000
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    api_keys: Dict[str, Optional[str]] = field(default_factory=dict)

    def get_model(self, name: str) -> Optional[ModelConfig]:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def arbiter_model(self) -> ModelConfig:
        model = self.get_model(self.arbiter)
        if model is None:
            raise ConfigError(f"Arbiter model ({self.arbiter}) not found in config")
        return model

    def pricing_for(self, name: str) -> Optional[ModelPricing]:
        """Pricing for a candidate by name; None means zero cost."""
        model = self.get_model(name)
        return model.pricing if model else None

    def api_key_for(self, provider: str) -> Optional[str]:
        return self.api_keys.get(provider)

    @property
    def responses_dir(self) -> Path:
        return Path(self.output_dir) / "responses"

    @property
    def reports_dir(self) -> Path:
        return Path(self.output_dir) / "reports"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Load configuration from YAML file."""
    config_path = Path(config_path)
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    return {}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def load_settings(config_path: str = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Build Settings from a YAML file and the environment.

    Priority: environment variables > YAML file > defaults.

    Args:
        config_path: Path to the YAML configuration (optional file)

    Returns:
        Settings instance
    """
    data = load_config(config_path)
    settings = Settings()

    if data.get("models"):
        settings.models = [ModelConfig.from_dict(m) for m in data["models"]]
    settings.arbiter = data.get("arbiter", settings.arbiter)

    paths = data.get("paths", {})
    settings.test_files_dir = paths.get("test_files", settings.test_files_dir)
    settings.output_dir = paths.get("output", settings.output_dir)
    settings.test_files = list(data.get("test_files", []))

    run = data.get("run", {})
    settings.request_delay_ms = int(run.get("request_delay_ms", settings.request_delay_ms))
    settings.fixture_delay_ms = int(run.get("fixture_delay_ms", settings.fixture_delay_ms))
    settings.timeout_ms = int(run.get("timeout_ms", settings.timeout_ms))
    settings.retry = RetryPolicy(max_attempts=int(run.get("max_attempts", 3)))

    settings.request_delay_ms = _env_int("REQUEST_DELAY_MS", settings.request_delay_ms)
    settings.fixture_delay_ms = _env_int("FIXTURE_DELAY_MS", settings.fixture_delay_ms)
    settings.timeout_ms = _env_int("TIMEOUT_MS", settings.timeout_ms)
    settings.arbiter = os.getenv("REVIEWBENCH_ARBITER") or settings.arbiter

    settings.api_keys = {
        "openai": os.getenv("OPENAI_API_KEY"),
        "anthropic": os.getenv("ANTHROPIC_API_KEY"),
        "google": os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY"),
        "litellm": os.getenv("LLM_API_KEY"),
    }
    return settings
