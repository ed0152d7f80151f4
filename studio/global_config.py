"""Global configuration storage for Quantum Studio.

Stores user preferences (AI provider, models, window sizes) in
~/.studio/config.json. Set STUDIO_HOME to use another directory.
"""

import json
import logging
import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class Provider(str, Enum):
    """Where generated text comes from."""

    OLLAMA = "ollama"
    ANTHROPIC = "anthropic"


class StudioConfig(BaseModel):
    """User-level settings shared by every workspace."""

    provider: Provider = Provider.OLLAMA

    # Local model served by Ollama
    ollama_model: str = "qwen2.5-coder:7b"
    ollama_host: str | None = None

    # Hosted model; the API key comes from ANTHROPIC_API_KEY
    anthropic_model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 8192

    autopilot_interval: float = 10.0
    log_window: int = 50
    history_limit: int = 10
    log_prompt_limit: int = 20


def get_config_dir() -> Path:
    """Get the Studio config directory."""
    override = os.environ.get("STUDIO_HOME")
    config_dir = Path(override) if override else Path.home() / ".studio"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_state_dir() -> Path:
    """Directory holding persisted workspaces, one JSON file per key."""
    state_dir = get_config_dir() / "state"
    state_dir.mkdir(exist_ok=True)
    return state_dir


def get_global_config() -> StudioConfig:
    """Load global configuration; a missing or invalid file gives defaults."""
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return StudioConfig(**data)
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            logger.warning(f"Ignoring invalid config {config_file}: {e}")
    return StudioConfig()


def save_global_config(config: StudioConfig) -> None:
    """Save global configuration."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(config.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )
