"""Keyword-based crisis detection.

A last-resort safety net, not a clinical classifier: the latest user
utterance is lower-cased and checked for any listed phrase as a plain
substring. No stemming, no negation handling. A phrase embedded in
unrelated words still triggers.
"""

from __future__ import annotations

from typing import Optional, Sequence

from mindfulspace.models.messages import ChatTurn, MessageRole

CRISIS_PHRASES: tuple[str, ...] = (
    "suicide",
    "kill myself",
    "end my life",
    "want to die",
    "hurt myself",
    "harm myself",
    "self-harm",
    "kill someone",
    "hurt someone",
    "harm others",
)

CRISIS_MESSAGE = (
    "I'm concerned about what you've shared. Your safety is the top priority. "
    "Please reach out to emergency services or a crisis hotline immediately."
)

# Shown alongside the crisis reply by clients
CRISIS_RESOURCES: tuple[dict[str, str], ...] = (
    {
        "name": "988 Suicide & Crisis Lifeline",
        "contact": "988",
        "instructions": "Call or text 988. Available 24/7.",
    },
    {
        "name": "Crisis Text Line",
        "contact": "741741",
        "instructions": "Text HOME to 741741.",
    },
    {
        "name": "Emergency Services",
        "contact": "911",
        "instructions": "Call 911 if you or someone else is in immediate danger.",
    },
)


def contains_crisis_language(text: Optional[str]) -> bool:
    """Return True if ``text`` contains any crisis phrase (case-insensitive)."""
    if not text:
        return False
    lowered = text.lower()
    return any(phrase in lowered for phrase in CRISIS_PHRASES)


def latest_user_content(turns: Sequence[ChatTurn]) -> str:
    """Content of the most recent turn if it came from the user, else ''."""
    if not turns:
        return ""
    last = turns[-1]
    if last.role != MessageRole.USER:
        return ""
    return last.content
