from keybot.commands.suggest import format_suggestions, rank, score, suggest

COMMANDS = ["ban", "unban", "stock"]


def test_close_typo_ranks_above_unrelated_name():
    ranked = dict(rank("bam", COMMANDS))
    assert ranked["ban"] > ranked["stock"]
    assert suggest("bam", COMMANDS)[0] == "ban"


def test_weak_matches_are_dropped():
    assert suggest("hello", COMMANDS) == []
    assert suggest("zzzz", COMMANDS) == []
    assert suggest("", COMMANDS) == []


def test_exact_prefix_substring_ordering():
    assert score("ban", "ban") == 1.0
    assert 0.9 < score("sto", "stock") < 1.0
    assert 0.8 < score("tock", "stock") < 0.9
    assert score("stcok", "stock") < score("tock", "stock")


def test_results_sorted_best_first():
    assert suggest("ban", COMMANDS) == ["ban", "unban"]


def test_threshold_is_strict():
    value = score("bam", "ban")
    assert suggest("bam", ["ban"], threshold=value) == []
    assert suggest("bam", ["ban"], threshold=value - 0.01) == ["ban"]


def test_format_suggestions_prefixes_delimiter():
    text = format_suggestions(["ban", "unban"], "!", "Did you mean:")
    assert text.splitlines() == ["Did you mean:", "✔ !ban", "✔ !unban"]
