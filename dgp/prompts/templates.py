"""
Prompt Template System

Reusable prompt templates with variable interpolation and validation.
"""

from typing import Any, Optional
from string import Formatter

from dgp.exceptions import PromptTemplateError


class PromptTemplate:
    """Reusable template for generating prompts with {variable} placeholders."""

    def __init__(
        self,
        template: str,
        name: Optional[str] = None,
        defaults: Optional[dict[str, Any]] = None,
    ):
        self.template = template.strip()
        self.name = name or "unnamed"
        self.defaults = defaults or {}
        self.required_vars = self._extract_variables()

    def _extract_variables(self) -> set[str]:
        formatter = Formatter()
        variables = set()
        for _, field_name, _, _ in formatter.parse(self.template):
            if field_name is not None:
                base_name = field_name.split(".")[0].split("[")[0]
                if base_name:
                    variables.add(base_name)
        return variables

    def render(self, **kwargs: Any) -> str:
        values = {**self.defaults, **kwargs}
        missing = self.required_vars - set(values.keys())
        if missing:
            raise PromptTemplateError(template_name=self.name, missing_vars=sorted(missing))
        try:
            return self.template.format(**values)
        except KeyError as e:
            raise PromptTemplateError(template_name=self.name, missing_vars=[str(e)]) from e

    def __repr__(self) -> str:
        return f"PromptTemplate(name='{self.name}', vars={self.required_vars})"


# Sentence Batch Template

SENTENCE_BATCH_TEMPLATE = PromptTemplate(
    """Generate {count} different sentences for Daily Grammar Practice.

Difficulty: {difficulty}
{difficulty_guidance}

Rules:
- Each sentence has 6-12 words.
- All lowercase, no punctuation at all.
- Interesting but standard enough for parts-of-speech, clause and diagram analysis.
- No two sentences may share the same main verb.

Respond with JSON:
{{
    "sentences": ["<sentence 1>", "<sentence 2>", ...]
}}""",
    name="sentence_batch",
)

DIFFICULTY_GUIDANCE = {
    "Easy": "Use one independent clause with a clear subject, verb and at most one object.",
    "Medium": "Use a compound sentence or add a prepositional phrase and a direct object.",
    "Hard": "Use a complex or compound-complex sentence with a dependent clause.",
}


# Grading Template

GRADING_TEMPLATE = PromptTemplate(
    """DGP (Daily Grammar Practice) Grading.
Target Sentence: "{sentence}"
Words (index: word): {indexed_words}
Stage: {stage}
User Work: {work_json}

Verify if the user's grammar analysis for this specific stage is 100% accurate.
Monday: Part of speech (and sub-type where given) for every word.
Tuesday: Subject/Verb/Complete Subject/Complete Predicate indices.
Wednesday: Clause count, sentence type and sentence purpose.
Thursday: Capitalization/Punctuation/Grammar fixes.
Friday: Reed-Kellogg diagram slots (subject, verb, object, modifiers correctly placed and rotated).

The feedback is shown directly to the student: hype when right, a concrete hint
(refer to words by their index) when wrong. Keep it under 30 words.

Respond with JSON:
{{
    "is_correct": <true/false>,
    "feedback": "<feedback for the student>",
    "correct_data": "<the correct analysis, or null>"
}}""",
    name="grading",
)


# Audio Templates

AMBIENT_TRACK_TEMPLATE = PromptTemplate(
    """Perform a 10-second HIGH-ENERGY INSTRUMENTAL ELECTRONIC / PHONK track for the stage: {stage}.

IMPORTANT RULES:
1. NO LYRICS. NO SPEAKING. NO EXPLAINING.
2. ONLY USE INSTRUMENTAL SOUNDS: 'DOOM-KAH-DOOM-DOOM-KAH' (Drums), 'BZZZT-vwoo' (Synths), 'Tink-tink' (Cowbells).
3. YOU MAY INCLUDE SHORT VOCAL STABS like "HEY!", "YEAH!", "GO!" rhythmically.
4. ACT AS A SYNTHESIZER AND DRUM MACHINE.

Structure:
- 0-3s: Heavy distorted kick and cowbell melody ('Tink-tink-tonk, Tink-tink-tonk').
- 3-7s: Add sharp snare and rapid hi-hats with a vocal stab 'GO!'.
- 7-10s: Glitchy electronic bass drop ('WUB-WUB-WUB-BRRR').""",
    name="ambient_track",
)

SFX_TEMPLATE = PromptTemplate(
    """Perform a single sound effect, under one second long. NO WORDS. NO SPEAKING.
Sound: {sound}""",
    name="sfx",
)

SFX_SOUNDS = {
    "select": "a short bright 'tik' click",
    "success": "a rising 'ba-DING!' chime",
    "error": "a low buzzing 'bzzzt-bonk'",
}
