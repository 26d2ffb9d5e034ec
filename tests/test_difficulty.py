import pytest

from app.schemas.scenario import ScenarioDraft
from app.services.difficulty import difficulty_label, ingest_scenario, premise_bonus, score_difficulty


def test_no_cues_is_easiest_regardless_of_premise():
    assert score_difficulty([]) == 1
    assert score_difficulty([], ["internal_process_knowledge", "correct_branding", "personalization"]) == 1


def test_three_obvious_cues_score_one():
    assert score_difficulty(["suspicious domain", "urgent language", "generic greeting"]) == 1


def test_three_obvious_cues_outweigh_subtle_ones():
    assert score_difficulty(["urgency", "gift cards", "spelling errors", "look-alike domain", "MFA phishing"]) == 1


def test_two_obvious_without_subtle_score_two():
    assert score_difficulty(["urgency", "gift cards", "reply-to mismatch"]) == 2


def test_only_subtle_cues_score_five():
    assert score_difficulty(["look-alike domain", "spoofed internal name"]) == 5
    assert score_difficulty(["authority pressure"]) == 5


def test_several_subtle_cues_with_one_obvious_score_four():
    assert score_difficulty(["urgency", "look-alike domain", "spoofed internal name"]) == 4


@pytest.mark.parametrize(
    "cues, expected",
    [
        (["urgency", "reply-to mismatch"], 2),  # avg 1.5
        (["urgency", "look-alike domain"], 3),  # avg 2.0
        (["urgency", "generic greeting", "look-alike domain"], 3),  # avg 1.67
        (["reply-to mismatch"], 3),  # single moderate cue
        (["an unlisted cue"], 3),  # unknown cues count as moderate
        (["urgency", "look-alike domain", "external SharePoint link", "reply-to mismatch"], 4),
    ],
)
def test_mixed_cues_use_average_weight(cues, expected):
    assert score_difficulty(cues) == expected


def test_order_does_not_matter():
    cues = ["urgency", "reply-to mismatch", "look-alike domain", "qr code"]
    assert score_difficulty(cues) == score_difficulty(list(reversed(cues)))
    assert score_difficulty(cues) == score_difficulty(cues)


def test_duplicate_cues_count_every_time():
    # one obvious cue alone would be "mixed" (avg 1.0 -> 2); three copies are three obvious cues
    assert score_difficulty(["urgency"]) == 2
    assert score_difficulty(["urgency", "urgency", "urgency"]) == 1


def test_premise_bonus_adds_half_rounded_down():
    cues = ["urgency", "reply-to mismatch"]  # base 2
    assert score_difficulty(cues, ["correct_branding"]) == 2
    assert score_difficulty(cues, ["internal_process_knowledge"]) == 3
    assert score_difficulty(cues, ["internal_process_knowledge", "correct_branding", "personalization"]) == 4


def test_premise_bonus_ignores_unknown_factors():
    assert premise_bonus(["uses magic", "correct_branding"]) == 1


def test_result_is_clamped_to_five():
    assert score_difficulty(["look-alike domain"], ["internal_process_knowledge", "role_appropriate"]) == 5


def test_ingest_computes_difficulty_once():
    draft = ScenarioDraft(
        legitimacy="malicious",
        correct_action="report",
        cues=("look-alike domain", "spoofed internal name"),
    )
    scenario = ingest_scenario(draft)
    assert scenario.difficulty_score == 5
    assert scenario.cues == draft.cues
    assert ingest_scenario(draft).difficulty_score == scenario.difficulty_score


def test_difficulty_labels():
    assert difficulty_label(1) == "Very Easy"
    assert difficulty_label(5) == "Very Hard"
    assert difficulty_label(9) == "Unknown"
