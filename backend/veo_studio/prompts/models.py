"""Form-state models for the prompt builder.

The document holds characters, dialogue lines and environment descriptors as
the UI edits them. Enumerated fields store canonical option values. Editing
helpers mutate the document in place; the compiler only reads it.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, fields

from .options import OTHER_ETHNICITY

CHARACTER_FIELDS = (
    "ethnicity",
    "ethnicity_custom",
    "gender",
    "age",
    "clothing",
    "hair",
    "description",
    "voice",
    "action",
)


@dataclass
class Character:
    id: int
    ethnicity: str = ""
    ethnicity_custom: str = ""
    gender: str = ""
    age: str = ""
    clothing: str = ""
    hair: str = ""
    description: str = ""
    voice: str = ""
    action: str = ""

    def resolved_ethnicity(self) -> str:
        """Ethnicity with the "Other" choice replaced by the custom free text (empty when unset)."""

        if self.ethnicity == OTHER_ETHNICITY:
            return self.ethnicity_custom.strip()
        return self.ethnicity.strip()


@dataclass
class DialogueLine:
    id: int
    speaker_id: int | None = None
    text: str = ""


@dataclass
class Environment:
    description: str = ""
    lighting: str = ""
    camera_angle: str = ""
    shot_style: str = ""
    extras: str = ""

    def is_empty(self) -> bool:
        return not any(str(getattr(self, item.name) or "").strip() for item in fields(self))


@dataclass
class PromptDocument:
    environment: Environment = field(default_factory=Environment)
    characters: list[Character] = field(default_factory=list)
    dialogue: list[DialogueLine] = field(default_factory=list)

    @classmethod
    def new(cls) -> "PromptDocument":
        """A fresh builder document with a single blank character."""

        return cls(characters=[Character(id=1)])

    def find_character(self, character_id: int | None) -> Character | None:
        if character_id is None:
            return None
        for character in self.characters:
            if character.id == character_id:
                return character
        return None

    def display_index(self, character_id: int | None) -> int | None:
        """1-based position of a character, or ``None`` when the reference dangles."""

        for position, character in enumerate(self.characters, start=1):
            if character_id is not None and character.id == character_id:
                return position
        return None

    def add_character(self, **values: str) -> Character:
        new_id = max((character.id for character in self.characters), default=0) + 1
        character = Character(id=new_id)
        self._apply_character_values(character, values)
        self.characters.append(character)
        return character

    def update_character(self, character_id: int, **values: str) -> Character:
        character = self.find_character(character_id)
        if character is None:
            raise KeyError(f"character {character_id} does not exist")
        self._apply_character_values(character, values)
        return character

    def remove_character(self, character_id: int) -> None:
        """Drop a character together with every dialogue line it speaks."""

        self.characters = [character for character in self.characters if character.id != character_id]
        self.dialogue = [line for line in self.dialogue if line.speaker_id != character_id]

    def add_dialogue(self, speaker_id: int | None = None, text: str = "") -> DialogueLine:
        line_id = int(time.time() * 1000)
        if self.dialogue:
            line_id = max(line_id, max(line.id for line in self.dialogue) + 1)
        line = DialogueLine(id=line_id, speaker_id=speaker_id, text=text)
        self.dialogue.append(line)
        return line

    def update_dialogue(
        self, line_id: int, speaker_id: int | None = None, text: str | None = None
    ) -> DialogueLine:
        for line in self.dialogue:
            if line.id == line_id:
                if speaker_id is not None:
                    line.speaker_id = speaker_id
                if text is not None:
                    line.text = text
                return line
        raise KeyError(f"dialogue line {line_id} does not exist")

    def remove_dialogue(self, line_id: int) -> None:
        self.dialogue = [line for line in self.dialogue if line.id != line_id]

    @staticmethod
    def _apply_character_values(character: Character, values: dict[str, str]) -> None:
        for name, value in values.items():
            if name not in CHARACTER_FIELDS:
                raise ValueError(f"unknown character field: {name}")
            setattr(character, name, value if value is not None else "")
