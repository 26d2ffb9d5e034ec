from app.services.cues import (
    CUE_CATEGORIES,
    CUE_WEIGHTS,
    PREMISE_ALIGNMENT_FACTORS,
    analyze_cues,
    cue_weight,
    lookup_cue,
    lookup_premise_factor,
)


def test_catalog_entries_are_well_formed():
    labels = [c.cue.lower() for c in CUE_WEIGHTS]
    assert len(labels) == len(set(labels))
    for entry in CUE_WEIGHTS:
        assert entry.weight in (1, 2, 3)
        assert entry.category in CUE_CATEGORIES
        assert entry.description


def test_lookup_is_case_insensitive():
    assert lookup_cue("Suspicious Domain").weight == 1
    assert lookup_cue("mfa phishing").cue == "MFA phishing"
    assert lookup_cue("not a real cue") is None


def test_unknown_cue_weighs_moderate():
    assert cue_weight("strange vibes") == 2
    assert cue_weight("look-alike domain") == 3
    assert cue_weight("urgency") == 1


def test_premise_factor_names_are_normalized():
    assert lookup_premise_factor("internal_process_knowledge").weight == 2
    assert lookup_premise_factor("Correct Branding").factor == "correct_branding"
    assert lookup_premise_factor("recent-event-tie-in").weight == 1
    assert lookup_premise_factor("uses magic") is None
    assert {f.factor for f in PREMISE_ALIGNMENT_FACTORS} >= {"personalization", "role_appropriate"}


def test_analyze_cues_splits_by_weight():
    analysis = analyze_cues(["urgency", "reply-to mismatch", "look-alike domain", "mystery"])
    assert [c.cue for c in analysis.obvious] == ["urgency"]
    assert [c.cue for c in analysis.moderate] == ["reply-to mismatch"]
    assert [c.cue for c in analysis.subtle] == ["look-alike domain"]
    assert analysis.unknown == ["mystery"]
