"""Gateway module - hosted LLM chat-completion client via REST API."""

from .client import GatewayClient

__all__ = ["GatewayClient"]
