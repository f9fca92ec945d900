import pytest

from agentws.fuzzy import fuzzy_score


def test_empty_pattern_matches_everything_with_zero():
    assert fuzzy_score("", "anything") == 0
    assert fuzzy_score("   ", "") == 0


@pytest.mark.parametrize(
    "pattern,haystack",
    [
        ("front", "frontend-rebuild node"),
        ("python", "backend-spike python"),
        ("fb", "foo bar"),
        ("renamed", "alpha claude my-renamed-task  /tmp/alpha"),
    ],
)
def test_subsequence_matches(pattern, haystack):
    score = fuzzy_score(pattern, haystack)
    assert isinstance(score, int) and score > 0


@pytest.mark.parametrize(
    "pattern,haystack",
    [
        ("front", "backend-spike python"),
        ("nonexistent-xyz", "docs-cleanup default"),
        ("codex", "alpha claude  /tmp/alpha"),
        ("ba", "ab"),
        ("longer", "long"),
    ],
)
def test_non_subsequence_does_not_match(pattern, haystack):
    assert fuzzy_score(pattern, haystack) is None


def test_word_boundary_beats_mid_word():
    assert fuzzy_score("bar", "foo bar") > fuzzy_score("bar", "foobarx")


def test_smart_case():
    assert fuzzy_score("abc", "ABC") is not None
    assert fuzzy_score("ABC", "abc") is None
    assert fuzzy_score("Abc", "Abc") is not None


def test_accents_are_normalized_in_haystack():
    assert fuzzy_score("cafe", "café") is not None
    assert fuzzy_score("café", "cafe") is None


def test_all_atoms_must_match():
    assert fuzzy_score("alpha codex", "alpha codex /tmp") is not None
    assert fuzzy_score("alpha codex", "alpha claude /tmp") is None


def test_negation_excludes():
    assert fuzzy_score("!claude", "alpha claude") is None
    assert fuzzy_score("!codex", "alpha claude") == 0


def test_prefix_suffix_exact_and_substring():
    assert fuzzy_score("^alp", "alpha") is not None
    assert fuzzy_score("^lph", "alpha") is None
    assert fuzzy_score("pha$", "alpha") is not None
    assert fuzzy_score("alp$", "alpha") is None
    assert fuzzy_score("^alpha$", "alpha") is not None
    assert fuzzy_score("^alph$", "alpha") is None
    assert fuzzy_score("'lph", "alpha") is not None
    assert fuzzy_score("'aph", "alpha") is None


def test_score_is_deterministic():
    first = fuzzy_score("bill", "/Users/me/work/billing-svc")
    second = fuzzy_score("bill", "/Users/me/work/billing-svc")
    assert isinstance(first, int) and first > 0
    assert first == second