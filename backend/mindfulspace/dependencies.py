"""Dependency injection providers for FastAPI."""

from fastapi import Depends

from mindfulspace.agent.prompts import Persona, load_persona
from mindfulspace.config import Settings, get_settings, settings
from mindfulspace.gateway import GatewayClient
from mindfulspace.memory.message_store import MessageStore
from mindfulspace.services.sessions import SessionService
from mindfulspace.services.therapist import TherapistChatHandler

# Global singleton instances (connection pools shared across requests)
_message_store: MessageStore | None = None
_gateway_client: GatewayClient | None = None
_persona: Persona | None = None


def get_message_store() -> MessageStore:
    """Return singleton MessageStore instance."""
    global _message_store
    if _message_store is None:
        _message_store = MessageStore(settings)
    return _message_store


def get_gateway_client() -> GatewayClient:
    """Return singleton GatewayClient instance."""
    global _gateway_client
    if _gateway_client is None:
        _gateway_client = GatewayClient(settings)
    return _gateway_client


def get_persona() -> Persona:
    """Return the persona loaded once from the configured YAML file."""
    global _persona
    if _persona is None:
        _persona = load_persona(settings.persona_path)
    return _persona


def get_therapist_handler(
    app_settings: Settings = Depends(get_settings),
    gateway: GatewayClient = Depends(get_gateway_client),
    store: MessageStore = Depends(get_message_store),
    persona: Persona = Depends(get_persona),
) -> TherapistChatHandler:
    """Build a handler per request from the shared collaborators."""
    return TherapistChatHandler(app_settings, gateway, store, persona)


def get_session_service(
    store: MessageStore = Depends(get_message_store),
    handler: TherapistChatHandler = Depends(get_therapist_handler),
) -> SessionService:
    return SessionService(store, handler)
