"""Tests for persona loading and gateway message construction."""

from pathlib import Path

import pytest

from mindfulspace.agent.prompts import Persona, build_gateway_messages, load_persona
from mindfulspace.models.messages import ChatTurn
from mindfulspace.personality.loader import load_personality


def test_default_persona_has_both_prompts(persona: Persona) -> None:
    assert "compassionate AI therapist" in persona.chat_prompt
    assert "Never provide medical diagnoses" in persona.chat_prompt
    assert "150-200 words" in persona.summary_prompt
    assert "coping strategies" in persona.summary_prompt


def test_chat_messages_are_prefixed_with_persona(persona: Persona) -> None:
    turns = [
        ChatTurn(role="user", content="I can't focus lately."),
        ChatTurn(role="assistant", content="What do you think is behind that?"),
        ChatTurn(role="user", content="Probably work."),
    ]

    messages = build_gateway_messages("chat", turns, persona)

    assert messages[0] == {"role": "system", "content": persona.chat_prompt}
    assert messages[1:] == [
        {"role": "user", "content": "I can't focus lately."},
        {"role": "assistant", "content": "What do you think is behind that?"},
        {"role": "user", "content": "Probably work."},
    ]


def test_summary_mode_uses_summary_prompt(persona: Persona) -> None:
    messages = build_gateway_messages(
        "summary", [ChatTurn(role="user", content="hello")], persona
    )
    assert messages[0]["content"] == persona.summary_prompt


def test_custom_persona_file(tmp_path: Path) -> None:
    path = tmp_path / "persona.yaml"
    path.write_text(
        "name: Sage\nchat_prompt: Be kind.\nsummary_prompt: Summarize briefly.\n"
    )

    persona = load_persona(path)

    assert persona == Persona(
        name="Sage", chat_prompt="Be kind.", summary_prompt="Summarize briefly."
    )


def test_missing_persona_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_personality(tmp_path / "nope.yaml")


def test_persona_file_without_summary_prompt(tmp_path: Path) -> None:
    path = tmp_path / "persona.yaml"
    path.write_text("chat_prompt: Be kind.\n")

    with pytest.raises(ValueError, match="summary_prompt"):
        load_personality(path)
