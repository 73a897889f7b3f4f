"""Chat client and prompts for AI translation assistance."""

from wantok.agents.llm import create_chat_client
from wantok.agents.prompts import load_prompt

__all__ = ["create_chat_client", "load_prompt"]
