"""Unit tests for dgp/models/stage_work.py and dgp/models/stages.py

Tests the per-stage work records (Monday tags, Tuesday toggle sets,
Wednesday/Thursday setters, Friday diagram slots) and stage ordering helpers.
"""

from typing import get_args

import pytest

from dgp.models.stage_work import (
    SUB_TYPES,
    FridayWork,
    MondayWork,
    PartOfSpeech,
    StageHistory,
    ThursdayWork,
    TuesdayWork,
    WednesdayWork,
)
from dgp.models.stages import STAGE_ORDER, Stage, next_stage, stage_index


# ---------------------------------------------------------------------------
# Stage ordering
# ---------------------------------------------------------------------------

class TestStageOrder:

    def test_order_is_monday_to_friday(self):
        assert [s.value for s in STAGE_ORDER] == [
            "Monday", "Tuesday", "Wednesday", "Thursday", "Friday",
        ]

    def test_next_stage(self):
        assert next_stage(Stage.MONDAY) == Stage.TUESDAY
        assert next_stage(Stage.THURSDAY) == Stage.FRIDAY

    def test_friday_has_no_next_stage(self):
        assert next_stage(Stage.FRIDAY) is None

    def test_stage_index(self):
        assert stage_index(Stage.MONDAY) == 0
        assert stage_index(Stage.FRIDAY) == 4


# ---------------------------------------------------------------------------
# Monday
# ---------------------------------------------------------------------------

class TestMondayWork:

    def test_set_part_of_speech(self):
        work = MondayWork()
        work.set_part_of_speech(1, "Noun")
        assert work.tags[1].part_of_speech == "Noun"
        assert work.tags[1].sub_type is None

    def test_sub_type_rejected_without_part_of_speech(self):
        work = MondayWork()
        assert work.set_sub_type(0, "Subject") is False
        assert work.tags == {}

    def test_sub_type_rejected_when_not_in_set(self):
        work = MondayWork()
        work.set_part_of_speech(2, "Verb")
        assert work.set_sub_type(2, "Subject") is False
        assert work.tags[2].sub_type is None

    def test_sub_type_accepted(self):
        work = MondayWork()
        work.set_part_of_speech(2, "Verb")
        assert work.set_sub_type(2, "Action Intransitive") is True
        assert work.tags[2].sub_type == "Action Intransitive"

    def test_sub_type_replaces_previous(self):
        work = MondayWork()
        work.set_part_of_speech(1, "Noun")
        work.set_sub_type(1, "Subject")
        work.set_sub_type(1, "Direct Object")
        assert work.tags[1].sub_type == "Direct Object"

    def test_changing_part_of_speech_clears_sub_type(self):
        work = MondayWork()
        work.set_part_of_speech(1, "Noun")
        work.set_sub_type(1, "Subject")
        work.set_part_of_speech(1, "Pronoun")
        assert work.tags[1].part_of_speech == "Pronoun"
        assert work.tags[1].sub_type is None

    def test_parts_without_sub_types(self):
        work = MondayWork()
        work.set_part_of_speech(3, "Preposition")
        assert SUB_TYPES["Preposition"] == ()
        assert work.set_sub_type(3, "Personal") is False

    def test_clear_tag(self):
        work = MondayWork()
        work.set_part_of_speech(0, "Article")
        work.clear_tag(0)
        work.clear_tag(5)
        assert work.tags == {}

    def test_every_part_of_speech_has_sub_type_entry(self):
        assert set(get_args(PartOfSpeech)) == set(SUB_TYPES)


# ---------------------------------------------------------------------------
# Tuesday
# ---------------------------------------------------------------------------

class TestTuesdayWork:

    def test_toggle_adds_then_removes(self):
        work = TuesdayWork()
        assert work.toggle_index("subject", 1) is True
        assert work.subject == {1}
        assert work.toggle_index("subject", 1) is False
        assert work.subject == set()

    def test_even_toggles_restore_membership(self):
        work = TuesdayWork()
        work.toggle_index("verb", 4)
        for _ in range(6):
            work.toggle_index("verb", 4)
        assert work.verb == {4}

    def test_categories_are_independent(self):
        work = TuesdayWork()
        work.toggle_index("complete_subject", 0)
        work.toggle_index("complete_subject", 1)
        work.toggle_index("complete_predicate", 2)
        assert work.complete_subject == {0, 1}
        assert work.complete_predicate == {2}
        assert work.subject == set()

    def test_unknown_category_raises(self):
        with pytest.raises(KeyError):
            TuesdayWork().toggle_index("object", 0)

    def test_serializes_sorted_lists(self):
        work = TuesdayWork()
        for idx in (3, 1, 2):
            work.toggle_index("complete_predicate", idx)
        assert work.model_dump(mode="json")["complete_predicate"] == [1, 2, 3]


# ---------------------------------------------------------------------------
# Wednesday / Thursday
# ---------------------------------------------------------------------------

class TestWednesdayWork:

    def test_defaults(self):
        work = WednesdayWork()
        assert work.clause_count == 1
        assert work.sentence_type == "Simple"
        assert work.sentence_purpose == "Declarative"

    def test_setters_replace(self):
        work = WednesdayWork()
        work.set_clause_count(2)
        work.set_sentence_type("Compound")
        work.set_sentence_purpose("Exclamatory")
        assert (work.clause_count, work.sentence_type, work.sentence_purpose) == (
            2, "Compound", "Exclamatory",
        )

    def test_clause_count_clamped_to_one(self):
        work = WednesdayWork()
        work.set_clause_count(0)
        assert work.clause_count == 1
        work.set_clause_count(-3)
        assert work.clause_count == 1


class TestThursdayWork:

    def test_set_corrected_text(self):
        work = ThursdayWork()
        assert work.corrected_sentence == ""
        work.set_corrected_text("The dog ran fast yesterday.")
        assert work.corrected_sentence == "The dog ran fast yesterday."


# ---------------------------------------------------------------------------
# Friday
# ---------------------------------------------------------------------------

class TestFridayWork:

    def test_default_slots(self):
        work = FridayWork()
        assert [(s.id, s.type, s.rotation) for s in work.slots] == [
            ("subj", "subject", 0),
            ("verb", "verb", 0),
            ("obj", "object", 0),
            ("mod1", "modifier", 45),
            ("mod2", "modifier", 45),
        ]
        assert all(s.word_index is None for s in work.slots)

    def test_assign_slot(self):
        work = FridayWork()
        work.assign_slot("subj", 1)
        assert work.slot("subj").word_index == 1

    def test_assign_does_not_clear_other_slots(self):
        work = FridayWork()
        work.assign_slot("subj", 1)
        work.assign_slot("obj", 1)
        assert work.slot("subj").word_index == 1
        assert work.slot("obj").word_index == 1

    def test_toggle_rotation(self):
        work = FridayWork()
        work.toggle_rotation("verb")
        assert work.slot("verb").rotation == 45
        work.toggle_rotation("verb")
        assert work.slot("verb").rotation == 0
        work.toggle_rotation("mod1")
        assert work.slot("mod1").rotation == 0

    def test_reset_clears_assignments_keeps_rotations(self):
        work = FridayWork()
        work.assign_slot("subj", 0)
        work.assign_slot("mod2", 3)
        work.toggle_rotation("subj")
        work.reset()
        assert all(s.word_index is None for s in work.slots)
        assert work.slot("subj").rotation == 45
        assert work.slot("mod2").rotation == 45

    def test_available_word_indices_masks_used(self):
        work = FridayWork()
        work.assign_slot("subj", 1)
        work.assign_slot("verb", 2)
        assert work.used_word_indices() == {1, 2}
        assert work.available_word_indices(5) == [0, 3, 4]

    def test_unknown_slot_raises(self):
        with pytest.raises(KeyError):
            FridayWork().slot("mod3")


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

class TestStageHistory:

    def test_for_stage_returns_typed_record(self):
        history = StageHistory()
        assert history.for_stage(Stage.MONDAY) is history.monday
        assert history.for_stage(Stage.TUESDAY) is history.tuesday
        assert history.for_stage(Stage.WEDNESDAY) is history.wednesday
        assert history.for_stage(Stage.THURSDAY) is history.thursday
        assert history.for_stage(Stage.FRIDAY) is history.friday
