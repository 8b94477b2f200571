"""
Text scoring and highlight ranges for inventory search.

Scores follow a strict priority chain; the first rule that applies wins and
scores are never summed:

    exact match      100
    starts with       80
    substring         60
    all tokens        50
    subsequence       30   (queries longer than two characters)
    no match           0

Comparison is case-insensitive on trimmed text. Ranges always index into the
text exactly as it was given, so the caller can highlight the display string.
"""

from .schemas import Range

EXACT_SCORE = 100
PREFIX_SCORE = 80
SUBSTRING_SCORE = 60
TOKENS_SCORE = 50
SUBSEQUENCE_SCORE = 30
NO_MATCH = 0

MIN_SUBSEQUENCE_LENGTH = 3


def score_match(text: str, query: str) -> int:
    """Returns the match score of `query` against `text`, 0 meaning no match."""
    return score_with_ranges(text, query)[0]


def score(text: str, query: str) -> tuple[int, bool]:
    """Returns (score, matched)."""
    value = score_match(text, query)
    return value, value > NO_MATCH


def match_ranges(text: str, query: str) -> list[Range]:
    """Returns the highlight ranges responsible for the match, if any."""
    return score_with_ranges(text, query)[1]


def score_with_ranges(text: str, query: str) -> tuple[int, list[Range]]:
    if not text or not query:
        return NO_MATCH, []

    lowered, origin = _lower_with_positions(text)
    normalized_text = lowered.strip()
    normalized_query = _lower_with_positions(query)[0].strip()
    if not normalized_text or not normalized_query:
        return NO_MATCH, []

    # Offset of the trimmed text inside the lowered one
    offset = len(lowered) - len(lowered.lstrip())

    if normalized_text == normalized_query:
        return EXACT_SCORE, _to_original([(offset, offset + len(normalized_text) - 1)], origin)

    if normalized_text.startswith(normalized_query):
        return PREFIX_SCORE, _to_original([(offset, offset + len(normalized_query) - 1)], origin)

    position = normalized_text.find(normalized_query)
    if position >= 0:
        start = offset + position
        return SUBSTRING_SCORE, _to_original([(start, start + len(normalized_query) - 1)], origin)

    tokens = normalized_query.split()
    if all(token in normalized_text for token in tokens):
        return TOKENS_SCORE, token_ranges(text, query)

    if len(normalized_query) >= MIN_SUBSEQUENCE_LENGTH:
        positions = _subsequence_positions(normalized_query, normalized_text)
        if positions is not None:
            return SUBSEQUENCE_SCORE, _to_original(
                [(offset + p, offset + p) for p in positions], origin
            )

    return NO_MATCH, []


def _lower_with_positions(text: str) -> tuple[str, list[int]]:
    """
    Lowercases `text` one character at a time and records, for every lowered
    character, the index of the character it came from. Some characters grow
    when lowercased ("İ" becomes two code points), so offsets found in the
    lowered string cannot be used on the original directly.
    """
    lowered = []
    origin = []
    for index, char in enumerate(text):
        lower = char.lower()
        lowered.append(lower)
        origin.extend([index] * len(lower))
    return "".join(lowered), origin


def _to_original(ranges: list[Range], origin: list[int]) -> list[Range]:
    return merge_ranges([(origin[start], origin[end]) for start, end in ranges])


def is_subsequence(query: str, text: str) -> bool:
    """True when the characters of `query` appear in `text` in order."""
    return _subsequence_positions(query, text) is not None


def _subsequence_positions(query: str, text: str) -> list[int] | None:
    positions = []
    i = 0
    for j, char in enumerate(text):
        if i == len(query):
            break
        if query[i] == char:
            positions.append(j)
            i += 1
    if i < len(query):
        return None
    return positions


def token_ranges(text: str, query: str) -> list[Range]:
    """Every case-insensitive occurrence of every whitespace-separated query token."""
    if not text or not query:
        return []

    lowered, origin = _lower_with_positions(text)
    ranges = []
    for token in _lower_with_positions(query)[0].split():
        start = lowered.find(token)
        while start >= 0:
            ranges.append((start, start + len(token) - 1))
            start = lowered.find(token, start + 1)
    return _to_original(ranges, origin)


def merge_ranges(ranges: list[Range]) -> list[Range]:
    """Sorts inclusive ranges and merges the ones that overlap or touch."""
    merged: list[Range] = []
    for start, end in sorted(ranges):
        if start > end:
            continue
        if merged and start <= merged[-1][1] + 1:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def highlight_segments(text: str, ranges: list[Range] | None) -> list[tuple[str, bool]]:
    """
    Splits `text` into (fragment, highlighted) pairs.
    Ranges are clipped to the text; bad ranges are ignored instead of raising.
    """
    if not text:
        return []

    last = len(text) - 1
    clipped = [
        (max(start, 0), min(end, last))
        for start, end in (ranges or [])
        if end >= 0 and start <= last
    ]

    segments = []
    cursor = 0
    for start, end in merge_ranges(clipped):
        if start > cursor:
            segments.append((text[cursor:start], False))
        segments.append((text[start : end + 1], True))
        cursor = end + 1
    if cursor <= last:
        segments.append((text[cursor:], False))
    return segments
