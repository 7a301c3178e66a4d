"""
Stage Work Models

Typed records for the user's in-progress answer on each of the five stages.
All five records coexist in a StageHistory for the lifetime of a sentence and
are only replaced when a new sentence begins.

Word indices (positions in the sentence's `words` list) are the unit of
reference everywhere.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_serializer

from dgp.models.stages import Stage


PartOfSpeech = Literal[
    "Noun", "Verb", "Pronoun", "Adjective", "Adverb",
    "Preposition", "Conjunction", "Interjection", "Article",
]

SUB_TYPES: dict[str, tuple[str, ...]] = {
    "Noun": (
        "Subject", "Direct Object", "Indirect Object", "Object of Preposition",
        "Appositive", "Predicate Nominative", "Direct Address",
    ),
    "Verb": ("Action Transitive", "Action Intransitive", "Linking", "Helping"),
    "Pronoun": (
        "Personal", "Possessive", "Reflexive", "Intensive",
        "Demonstrative", "Indefinite", "Interrogative", "Relative",
    ),
    "Adjective": ("Proper", "Predicate Adjective", "Demonstrative", "Possessive"),
    "Adverb": ("Manner", "Time", "Place", "Degree"),
    "Conjunction": ("Coordinating", "Subordinating", "Correlative"),
    "Article": ("Definite", "Indefinite"),
    "Preposition": (),
    "Interjection": (),
}

TuesdayCategory = Literal["subject", "verb", "complete_subject", "complete_predicate"]
TUESDAY_CATEGORIES: tuple[str, ...] = ("subject", "verb", "complete_subject", "complete_predicate")

SentenceType = Literal["Simple", "Compound", "Complex", "Compound-Complex"]
SentencePurpose = Literal["Declarative", "Interrogative", "Imperative", "Exclamatory"]

SlotId = Literal["subj", "verb", "obj", "mod1", "mod2"]
SlotType = Literal["subject", "verb", "object", "modifier"]
Rotation = Literal[0, 45]


# ---------------------------------------------------------------------------
# Monday: parts of speech
# ---------------------------------------------------------------------------

class WordTag(BaseModel):
    """Part of speech for one word, with an optional sub-type."""

    part_of_speech: PartOfSpeech
    sub_type: Optional[str] = None


class MondayWork(BaseModel):
    tags: dict[int, WordTag] = Field(default_factory=dict)

    def set_part_of_speech(self, word_index: int, pos: PartOfSpeech) -> None:
        # A new part of speech always starts without a sub-type
        self.tags[word_index] = WordTag(part_of_speech=pos)

    def set_sub_type(self, word_index: int, sub_type: str) -> bool:
        """
        Set the sub-type for an already tagged word.

        Returns False (and changes nothing) when the word has no part of
        speech yet or the sub-type does not belong to it.
        """
        tag = self.tags.get(word_index)
        if tag is None:
            return False
        if sub_type not in SUB_TYPES.get(tag.part_of_speech, ()):
            return False
        tag.sub_type = sub_type
        return True

    def clear_tag(self, word_index: int) -> None:
        self.tags.pop(word_index, None)


# ---------------------------------------------------------------------------
# Tuesday: subject / predicate
# ---------------------------------------------------------------------------

class TuesdayWork(BaseModel):
    subject: set[int] = Field(default_factory=set)
    verb: set[int] = Field(default_factory=set)
    complete_subject: set[int] = Field(default_factory=set)
    complete_predicate: set[int] = Field(default_factory=set)

    @field_serializer("subject", "verb", "complete_subject", "complete_predicate")
    def _sorted(self, value: set[int]) -> list[int]:
        return sorted(value)

    def indices(self, category: TuesdayCategory) -> set[int]:
        if category not in TUESDAY_CATEGORIES:
            raise KeyError(category)
        return getattr(self, category)

    def toggle_index(self, category: TuesdayCategory, word_index: int) -> bool:
        """Symmetric difference of one index against a category. Returns new membership."""
        members = self.indices(category)
        members ^= {word_index}
        return word_index in members


# ---------------------------------------------------------------------------
# Wednesday: clauses and sentence structure
# ---------------------------------------------------------------------------

class WednesdayWork(BaseModel):
    clause_count: int = Field(default=1, ge=1)
    sentence_type: SentenceType = "Simple"
    sentence_purpose: SentencePurpose = "Declarative"

    def set_clause_count(self, count: int) -> None:
        self.clause_count = max(1, int(count))

    def set_sentence_type(self, sentence_type: SentenceType) -> None:
        self.sentence_type = sentence_type

    def set_sentence_purpose(self, purpose: SentencePurpose) -> None:
        self.sentence_purpose = purpose


# ---------------------------------------------------------------------------
# Thursday: error correction
# ---------------------------------------------------------------------------

class ThursdayWork(BaseModel):
    corrected_sentence: str = ""

    def set_corrected_text(self, text: str) -> None:
        self.corrected_sentence = text


# ---------------------------------------------------------------------------
# Friday: diagram
# ---------------------------------------------------------------------------

class DiagramSlot(BaseModel):
    """One diagram position. Id and type are fixed; word and rotation change."""

    id: SlotId
    type: SlotType
    word_index: Optional[int] = None
    rotation: Rotation = 0


def _default_slots() -> list[DiagramSlot]:
    return [
        DiagramSlot(id="subj", type="subject", rotation=0),
        DiagramSlot(id="verb", type="verb", rotation=0),
        DiagramSlot(id="obj", type="object", rotation=0),
        DiagramSlot(id="mod1", type="modifier", rotation=45),
        DiagramSlot(id="mod2", type="modifier", rotation=45),
    ]


class FridayWork(BaseModel):
    slots: list[DiagramSlot] = Field(default_factory=_default_slots)

    def slot(self, slot_id: SlotId) -> DiagramSlot:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        raise KeyError(slot_id)

    def assign_slot(self, slot_id: SlotId, word_index: int) -> None:
        # Other slots holding the same word are left alone; the picker masks used words.
        self.slot(slot_id).word_index = word_index

    def toggle_rotation(self, slot_id: SlotId) -> None:
        slot = self.slot(slot_id)
        slot.rotation = 45 if slot.rotation == 0 else 0

    def reset(self) -> None:
        """Clear every assignment; rotations stay as the user left them."""
        for slot in self.slots:
            slot.word_index = None

    def used_word_indices(self) -> set[int]:
        return {s.word_index for s in self.slots if s.word_index is not None}

    def available_word_indices(self, word_count: int) -> list[int]:
        used = self.used_word_indices()
        return [idx for idx in range(word_count) if idx not in used]


# ---------------------------------------------------------------------------
# History: one typed record per stage
# ---------------------------------------------------------------------------

StageWork = MondayWork | TuesdayWork | WednesdayWork | ThursdayWork | FridayWork


class StageHistory(BaseModel):
    """Fixed-arity record holding every stage's work for the active sentence."""

    monday: MondayWork = Field(default_factory=MondayWork)
    tuesday: TuesdayWork = Field(default_factory=TuesdayWork)
    wednesday: WednesdayWork = Field(default_factory=WednesdayWork)
    thursday: ThursdayWork = Field(default_factory=ThursdayWork)
    friday: FridayWork = Field(default_factory=FridayWork)

    def for_stage(self, stage: Stage) -> StageWork:
        return getattr(self, stage.value.lower())
