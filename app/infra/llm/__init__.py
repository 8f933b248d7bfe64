from app.infra.llm.anthropic_client import AnthropicClient
from app.infra.llm.base import BaseLLMClient
from app.infra.llm.client import complete
from app.infra.llm.factory import get_llm_client, reset_clients, resolve_provider
from app.infra.llm.openai_client import OpenAIClient

__all__ = [
    "BaseLLMClient",
    "OpenAIClient",
    "AnthropicClient",
    "get_llm_client",
    "resolve_provider",
    "reset_clients",
    "complete",
]
