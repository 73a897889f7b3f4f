"""Azure OpenAI chat client factory."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from agent_framework.azure import AzureOpenAIChatClient
from azure.identity import DefaultAzureCredential

if TYPE_CHECKING:
    from wantok.config import OpenAIConfig

logger = logging.getLogger(__name__)


def create_chat_client(
    config: OpenAIConfig, use_key: str | None = None
) -> AzureOpenAIChatClient:
    """Create an AzureOpenAIChatClient.

    Uses the API key when one is given, otherwise DefaultAzureCredential
    (Azure CLI locally, managed identity when deployed).
    """
    logger.info(
        "Chat client created — endpoint=%s deployment=%s",
        config.endpoint,
        config.deployment,
    )
    if use_key:
        return AzureOpenAIChatClient(
            endpoint=config.endpoint,
            deployment_name=config.deployment,
            api_key=use_key,
        )
    return AzureOpenAIChatClient(
        endpoint=config.endpoint,
        deployment_name=config.deployment,
        credential=DefaultAzureCredential(),
    )
