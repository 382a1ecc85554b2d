"""System instructions for the counselor persona and session summaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Sequence

from mindfulspace.models.messages import ChatTurn
from mindfulspace.personality.loader import load_personality

logger = logging.getLogger(__name__)

Mode = Literal["chat", "summary"]


@dataclass(frozen=True)
class Persona:
    name: str
    chat_prompt: str
    summary_prompt: str

    def system_prompt(self, mode: Mode) -> str:
        if mode == "summary":
            return self.summary_prompt
        return self.chat_prompt


def load_persona(path: Path | None = None) -> Persona:
    """Build a ``Persona`` from the YAML personality file."""
    config = load_personality(path)
    persona = Persona(
        name=config.get("name", "MindfulSpace"),
        chat_prompt=config["chat_prompt"].strip(),
        summary_prompt=config["summary_prompt"].strip(),
    )
    logger.debug("Loaded persona %s", persona.name)
    return persona


def build_gateway_messages(
    mode: Mode,
    turns: Sequence[ChatTurn],
    persona: Persona,
) -> list[dict[str, str]]:
    """Prefix the conversation with the system instruction for ``mode``."""
    messages = [{"role": "system", "content": persona.system_prompt(mode)}]
    messages.extend(turn.as_gateway_dict() for turn in turns)
    return messages
