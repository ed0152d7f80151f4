"""AI infrastructure for Quantum Studio.

Text sources implementing the ``TextSource`` port.
"""

from studio.global_config import Provider, StudioConfig
from studio.infrastructure.ai.anthropic_source import AnthropicTextSource
from studio.infrastructure.ai.ollama import OllamaTextSource


def create_text_source(config: StudioConfig) -> OllamaTextSource | AnthropicTextSource:
    """Build the text source selected in the configuration."""
    if config.provider == Provider.ANTHROPIC:
        return AnthropicTextSource(model=config.anthropic_model, max_tokens=config.max_tokens)
    return OllamaTextSource(model=config.ollama_model, host=config.ollama_host)


__all__ = [
    "OllamaTextSource",
    "AnthropicTextSource",
    "create_text_source",
]
