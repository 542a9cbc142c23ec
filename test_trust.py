"""Unit tests for the detection stabilizer core."""

from trust.history import LabelHistory, ConfidenceHistory
from trust.candidates import admit_candidates
from trust.validators import validate_confidence_pattern, validate_denomination_history
from trust.decision_engine import DecisionEngine, DecisionPath, StabilizerState
from trust.config import DENOMINATION_RULES, HIGHEST_VALUE, SECOND_HIGHEST_VALUE
from ml.config import CLASSES


def feed(engine, state, label, confidence, times=1):
    """Feed the same single-candidate frame several times, returning all results."""
    return [engine.process([(label, confidence)], state) for _ in range(times)]


def confirmations(results):
    return [r.confirmed_label for r in results if r.changed]


def test_label_history_capacity():
    """Label history keeps only the most recent entries in arrival order."""
    history = LabelHistory(capacity=10)
    labels = [f"label-{i}" for i in range(15)]
    for label in labels:
        history.append(label)
        assert len(history) <= 10, "History must never exceed capacity"

    assert history.to_list() == labels[5:], "Oldest entries should be evicted first"
    print("✓ Label history capacity test passed")


def test_confidence_history_capacity():
    """Confidence history keeps the last five (label, confidence) pairs."""
    history = ConfidenceHistory(capacity=5)
    entries = [("5-tl", 0.1 * i) for i in range(8)]
    for label, conf in entries:
        history.append(label, conf)
        assert len(history) <= 5

    assert history.to_list() == entries[3:]
    assert history.recent(3) == entries[5:]
    print("✓ Confidence history capacity test passed")


def test_history_ratio_uses_full_window():
    """Ratio denominator is the window size, not the current length."""
    history = LabelHistory(capacity=10)
    for _ in range(3):
        history.append("200-tl")

    assert history.ratio("200-tl") == 0.3
    assert not validate_denomination_history("200-tl", history)
    print("✓ History ratio window test passed")


def test_denomination_rules_scale_with_value():
    """Higher denominations require more consecutive frames."""
    required = [DENOMINATION_RULES[label].required_consecutive for label in CLASSES]
    assert required == sorted(required)
    assert required[0] == 3 and required[-1] == 7
    assert DENOMINATION_RULES[HIGHEST_VALUE].history_ratio_required == 0.75
    assert DENOMINATION_RULES[SECOND_HIGHEST_VALUE].history_ratio_required == 0.70
    print("✓ Denomination rule table test passed")


def test_admit_candidates_drops_malformed():
    """Malformed candidates are dropped, valid ones are ranked."""
    raw = [
        ("5-tl", "abc"),
        None,
        ("", 0.9),
        ("20-tl", float("nan")),
        ("10-tl", 1.5),
        ("100-tl", True),
        {"label": "50-tl", "confidence": 0.7},
        ("200-tl", 0.2),
        ("5-tl", 0.95),
    ]
    admitted = admit_candidates(raw)

    assert [c.label for c in admitted] == ["5-tl", "50-tl"], "Only valid candidates above floor survive"
    assert admitted[0].confidence == 0.95
    print("✓ Candidate admission test passed")


def test_admission_floor_is_inclusive():
    """A candidate at exactly 0.3 is admitted; anything lower is dropped."""
    admitted = admit_candidates([("5-tl", 0.3), ("10-tl", 0.2999)])

    assert [c.label for c in admitted] == ["5-tl"]
    print("✓ Admission floor boundary test passed")


def test_no_candidates_leaves_state_untouched():
    """A frame with nothing above the floor mutates nothing."""
    engine = DecisionEngine()
    state = StabilizerState()

    for candidates in ([], None, [("5-tl", 0.1), ("10-tl", 0.29)]):
        result = engine.process(candidates, state)
        assert result.path == DecisionPath.SKIPPED

    assert state.consecutive_count == 0
    assert state.last_label is None
    assert len(state.label_history) == 0
    assert len(state.confidence_history) == 0
    print("✓ Empty frame test passed")


def test_confidence_history_tracks_all_attempts():
    """Low-confidence tops enter the confidence history but not the label history."""
    engine = DecisionEngine()
    state = StabilizerState()

    engine.process([("20-tl", 0.5)], state)
    engine.process([("20-tl", 0.8)], state)  # Not strictly above the 0.8 floor
    engine.process([("20-tl", 0.81)], state)

    assert state.label_history.to_list() == ["20-tl"]
    assert len(state.confidence_history) == 3
    print("✓ Confidence history attempt tracking test passed")


def test_only_top_candidate_affects_state():
    """Lower-ranked candidates are ignored."""
    engine = DecisionEngine()
    state = StabilizerState()

    engine.process([("5-tl", 0.5), ("20-tl", 0.9), ("50-tl", 0.85)], state)

    assert state.last_label == "20-tl"
    assert state.label_history.to_list() == ["20-tl"]
    assert state.confidence_history.to_list() == [("20-tl", 0.9)]
    print("✓ Top candidate test passed")


def test_consecutive_reset_law():
    """A different top label resets the counter to 1 for the new label."""
    engine = DecisionEngine()
    state = StabilizerState()

    feed(engine, state, "20-tl", 0.85, times=3)
    assert state.consecutive_count == 3

    result = engine.process([("50-tl", 0.85)], state)
    assert state.consecutive_count == 1
    assert state.last_label == "50-tl"
    assert result.consecutive_count == 1
    print("✓ Consecutive reset law test passed")


def test_fast_path_confirms_on_second_frame():
    """Two frames above 0.95 confirm a non-top denomination."""
    engine = DecisionEngine()
    state = StabilizerState()

    first = engine.process([("10-tl", 0.97)], state)
    assert first.path == DecisionPath.FAST
    assert not first.changed, "One frame must not confirm"

    second = engine.process([("10-tl", 0.97)], state)
    assert second.confirmed_label == "10-tl"
    assert second.route == "fast"
    assert state.confirmed_label == "10-tl"
    print("✓ Fast path test passed")


def test_fast_path_holds_for_every_non_top_label():
    """No non-top label confirms on one fast frame; each confirms on the second."""
    for label in CLASSES[:-1]:
        engine = DecisionEngine()
        state = StabilizerState()

        first = engine.process([(label, 0.97)], state)
        second = engine.process([(label, 0.97)], state)

        assert first.path == DecisionPath.FAST
        assert not first.changed, f"{label} must not confirm on one frame"
        assert second.confirmed_label == label
        assert second.route == "fast"
    print("✓ Fast path per-label test passed")


def test_confirmation_is_idempotent():
    """Re-observing the confirmed label never confirms again."""
    engine = DecisionEngine()
    state = StabilizerState()

    results = feed(engine, state, "10-tl", 0.97, times=6)
    results += feed(engine, state, "10-tl", 0.85, times=6)

    assert confirmations(results) == ["10-tl"]
    assert results[-1].reason == "already_confirmed"
    print("✓ Idempotent confirmation test passed")


def test_label_change_confirms_new_label():
    """A new stable label replaces the confirmed one with one event."""
    engine = DecisionEngine()
    state = StabilizerState()

    results = feed(engine, state, "10-tl", 0.97, times=3)
    results += feed(engine, state, "20-tl", 0.97, times=3)

    assert confirmations(results) == ["10-tl", "20-tl"]
    print("✓ Label change test passed")


def test_enhanced_path_counts_per_denomination():
    """Below the fast threshold, required_consecutive frames are needed."""
    engine = DecisionEngine()
    state = StabilizerState()

    results = feed(engine, state, "50-tl", 0.9, times=4)

    assert all(r.path == DecisionPath.ENHANCED for r in results)
    assert [r.changed for r in results] == [False, False, False, True]
    assert results[-1].route == "enhanced"
    print("✓ Enhanced path counting test passed")


def test_highest_value_never_uses_fast_path():
    """The top denomination goes through the enhanced path even at 0.97."""
    engine = DecisionEngine(pattern_route=False)
    state = StabilizerState()

    results = feed(engine, state, HIGHEST_VALUE, 0.97, times=2)

    assert all(r.path == DecisionPath.ENHANCED for r in results)
    assert not any(r.changed for r in results)
    print("✓ Highest value path test passed")


def test_enhanced_path_history_gate_blocks_counting():
    """Consecutive count alone cannot confirm the top note without history support."""
    engine = DecisionEngine(pattern_route=False)
    state = StabilizerState()

    # Fill the label history with an unrelated note first
    feed(engine, state, "5-tl", 0.85, times=3)
    results = feed(engine, state, HIGHEST_VALUE, 0.90, times=7)

    assert state.consecutive_count == 7, "Consecutive requirement is met"
    assert not any(r.changed for r in results), "Ratio 0.7 < 0.75 must block confirmation"
    assert results[-1].reason == "unstable_history"
    assert results[-1].history_ratio == 0.7

    # One more frame lifts the ratio to 0.8
    result = engine.process([(HIGHEST_VALUE, 0.90)], state)
    assert result.confirmed_label == HIGHEST_VALUE
    assert result.route == "enhanced"
    print("✓ History gate test passed")


def test_second_highest_counting_route():
    """The second-highest note needs 5 consecutive frames and a 0.70 ratio."""
    engine = DecisionEngine(pattern_route=False)
    state = StabilizerState()

    results = feed(engine, state, SECOND_HIGHEST_VALUE, 0.93, times=7)

    assert [r.changed for r in results] == [False] * 6 + [True]
    assert results[4].reason == "unstable_history", "Count of 5 is not enough at ratio 0.5"
    print("✓ Second-highest counting route test passed")


def test_ultra_high_single_shot():
    """One observation at 0.9995 confirms the top note via the pattern validator."""
    engine = DecisionEngine()
    state = StabilizerState()

    result = engine.process([(HIGHEST_VALUE, 0.9995)], state)

    assert result.consecutive_count == 1
    assert result.confirmed_label == HIGHEST_VALUE
    assert result.route == "pattern"
    print("✓ Ultra-high single shot test passed")


def test_pattern_route_disabled_in_isolation():
    """With only the counting route, the same single frame does not confirm."""
    engine = DecisionEngine(pattern_route=False)
    state = StabilizerState()

    result = engine.process([(HIGHEST_VALUE, 0.9995)], state)
    assert not result.changed
    print("✓ Pattern route isolation test passed")


def test_counting_route_disabled_in_isolation():
    """With only the pattern route, lower notes are never confirmed."""
    engine = DecisionEngine(counting_route=False)
    state = StabilizerState()

    results = feed(engine, state, "10-tl", 0.97, times=5)
    results += feed(engine, state, "50-tl", 0.90, times=8)

    assert confirmations(results) == []
    assert results[-1].reason == "counting_disabled"
    print("✓ Counting route isolation test passed")


def test_pattern_two_high_confidence_frames():
    """Two of the last three top-note frames at >= 0.95 confirm."""
    engine = DecisionEngine(counting_route=False)
    state = StabilizerState()

    first = engine.process([(HIGHEST_VALUE, 0.96)], state)
    second = engine.process([(HIGHEST_VALUE, 0.96)], state)

    assert not first.changed
    assert second.confirmed_label == HIGHEST_VALUE
    print("✓ Pattern high-confidence test passed")


def test_pattern_three_medium_confidence_frames():
    """Three consecutive top-note frames at >= 0.85 confirm via the pattern route."""
    engine = DecisionEngine()
    state = StabilizerState()

    feed(engine, state, "5-tl", 0.85, times=3)
    results = feed(engine, state, HIGHEST_VALUE, 0.90, times=3)

    assert [r.changed for r in results] == [False, False, True]
    assert results[-1].route == "pattern"
    print("✓ Pattern medium-confidence test passed")


def test_pattern_interrupted_by_other_label():
    """An intervening label inside the three-frame window prevents the medium tier."""
    history = ConfidenceHistory()
    history.append(HIGHEST_VALUE, 0.9)
    history.append("50-tl", 0.9)
    history.append(HIGHEST_VALUE, 0.9)

    assert not validate_confidence_pattern(HIGHEST_VALUE, 0.9, history)
    print("✓ Pattern interruption test passed")


def test_second_highest_pattern_threshold():
    """The second-highest note confirms directly at >= 0.90."""
    history = ConfidenceHistory()

    assert validate_confidence_pattern(SECOND_HIGHEST_VALUE, 0.90, history)
    assert not validate_confidence_pattern(SECOND_HIGHEST_VALUE, 0.89, history)
    assert not validate_confidence_pattern("50-tl", 0.99, history), "Lower notes never pass"

    engine = DecisionEngine()
    state = StabilizerState()
    result = engine.process([(SECOND_HIGHEST_VALUE, 0.92)], state)
    assert result.route == "pattern"
    print("✓ Second-highest pattern test passed")


def test_unknown_label_uses_default_rule():
    """Labels outside the denomination table need three frames."""
    engine = DecisionEngine()
    state = StabilizerState()

    results = feed(engine, state, "euro-5", 0.9, times=3)
    assert [r.changed for r in results] == [False, False, True]
    print("✓ Default rule test passed")


def test_state_reset_keeps_history():
    """Resetting clears counters and confirmation but keeps histories by default."""
    engine = DecisionEngine()
    state = StabilizerState()
    feed(engine, state, "10-tl", 0.97, times=2)

    state.reset()
    assert state.confirmed_label is None
    assert state.consecutive_count == 0
    assert state.last_label is None
    assert len(state.label_history) == 2

    state.reset(clear_history=True)
    assert len(state.label_history) == 0
    assert len(state.confidence_history) == 0
    print("✓ State reset test passed")


def run_all_tests():
    """Run all tests."""
    print("Running stabilizer tests...\n")

    tests = [value for name, value in sorted(globals().items())
             if name.startswith("test_") and callable(value)]
    try:
        for test in tests:
            test()
        print("\n✅ All tests passed!")
        return True
    except AssertionError as e:
        print(f"\n❌ Test failed: {e}")
        return False


if __name__ == "__main__":
    run_all_tests()
