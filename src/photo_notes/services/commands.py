"""Voice command parsing for final transcriptions."""

import re
from dataclasses import dataclass
from enum import Enum

END_NOTE_PHRASES = ("end note", "endnote", "stop note")
START_NOTE_PHRASE = "start note"
CAPTURE_PHRASES = (
    "take a photo",
    "take a picture",
    "take photo",
    "take picture",
    "save photo",
)

_LEADING_NON_LETTERS = re.compile(r"^[^a-zA-Z]*")
_CAPTURE_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(phrase) for phrase in CAPTURE_PHRASES) + r")\b",
    re.IGNORECASE,
)


class CommandKind(Enum):
    """Kinds of voice commands recognised in a final phrase."""

    IGNORE = "ignore"
    START_NOTE = "start_note"
    END_NOTE = "end_note"
    NOTE_TEXT = "note_text"
    GREETING = "greeting"
    CAPTURE = "capture"


@dataclass(frozen=True)
class VoiceCommand:
    """A classified transcription."""

    kind: CommandKind
    text: str | None = None


def parse_command(
    text: str, activation_words: tuple[str, ...], recording: bool
) -> VoiceCommand:
    """Classify a final transcription given the note recording state."""
    lowered = text.lower()
    if recording:
        if any(phrase in lowered for phrase in END_NOTE_PHRASES):
            return VoiceCommand(CommandKind.END_NOTE)
        return VoiceCommand(CommandKind.NOTE_TEXT, text.strip())
    if START_NOTE_PHRASE in lowered:
        return VoiceCommand(CommandKind.START_NOTE)
    if any(word in lowered for word in activation_words):
        return VoiceCommand(CommandKind.GREETING)
    match = _CAPTURE_PATTERN.search(text)
    if match:
        title = text[match.end() :].strip()
        return VoiceCommand(CommandKind.CAPTURE, title or None)
    return VoiceCommand(CommandKind.IGNORE)


def format_title(title: str) -> str:
    """Drop leading non-letters, capitalise, and add the title label."""
    trimmed = _LEADING_NON_LETTERS.sub("", title)
    if not trimmed:
        return "Title: "
    return "Title: " + trimmed[0].upper() + trimmed[1:]
