"""Best-effort English filter for general-news feed items."""

from classify_items.tables import load_language_patterns


def count_matches(patterns, text: str) -> int:
    return sum(len(pattern.findall(text)) for pattern in patterns)


def is_english_content(text: str) -> bool:
    """Return True unless non-English common words outweigh English ones.

    Text counts as English when no non-English common word occurs at all, or
    when English indicators outnumber non-English hits more than two to one.
    """
    patterns = load_language_patterns()
    lower_text = text.lower()

    non_english_matches = count_matches(patterns.non_english, lower_text)
    if non_english_matches == 0:
        return True

    english_matches = count_matches(patterns.english, lower_text)
    return english_matches > non_english_matches * 2
