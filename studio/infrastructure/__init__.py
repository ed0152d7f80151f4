"""Infrastructure layer for Quantum Studio.

Implementations of the application ports: JSON file storage and
repositories, and the Ollama / Anthropic text sources.
"""

from studio.application.ports import TextSource
from studio.application.studio import Studio
from studio.global_config import StudioConfig, get_global_config, get_state_dir
from studio.infrastructure.ai import AnthropicTextSource, OllamaTextSource, create_text_source
from studio.infrastructure.storage import (
    ExtensionRegistry,
    JsonFileStore,
    JsonStorage,
    MemoryStore,
    WorkspaceRepository,
)


def build_studio(
    config: StudioConfig | None = None,
    source: TextSource | None = None,
) -> Studio:
    """Wire a Studio over the on-disk state directory."""
    config = config or get_global_config()
    store = JsonFileStore(get_state_dir())
    return Studio(
        repository=WorkspaceRepository(store),
        extensions=ExtensionRegistry(store),
        source=source or create_text_source(config),
        config=config,
    )


__all__ = [
    # Storage
    "JsonStorage",
    "JsonFileStore",
    "MemoryStore",
    "WorkspaceRepository",
    "ExtensionRegistry",
    # AI
    "OllamaTextSource",
    "AnthropicTextSource",
    "create_text_source",
    # Wiring
    "build_studio",
]
