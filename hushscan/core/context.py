import re
from typing import List, Tuple

KEYWORD_SCORE = 5.0
ASSIGNMENT_SCORE = 3.0
TERMINATOR_SCORE = 1.0

_KEYWORD_REGEX = re.compile(r"(password|token|key|secret|auth|credential)", re.IGNORECASE)


def context_score(line: str, offset: int) -> float:
    """
    Scores the line a candidate sits on.

    The line is split at the start of the match only. Everything from the
    first character of the match onwards counts as "after".

    Args:
        line (str): The context line, without its trailing newline.
        offset (int): The match's start offset within the line.

    Returns:
        The sum of the keyword, assignment and terminator contributions (max 9.0).
    """
    before = line[:offset]
    after = line[offset:]

    score = 0.0
    if _KEYWORD_REGEX.search(before):
        score += KEYWORD_SCORE
    if "=" in before or ":" in before:
        score += ASSIGNMENT_SCORE
    if "\n" in after or ";" in after:
        score += TERMINATOR_SCORE
    return score


def locate(lines: List[str], offset: int) -> Tuple[int, str, int]:
    """
    Finds the line holding a content offset.

    Args:
        lines (List[str]): The content split on "\\n".
        offset (int): An offset into the original content.

    Returns:
        (1-based line number, line text, offset within that line). When the
        offset lies past the last line, the line text is empty.
    """
    line_num = 1
    char_count = 0
    for line in lines:
        if char_count + len(line) >= offset:
            return line_num, line, offset - char_count
        char_count += len(line) + 1
        line_num += 1
    return line_num, "", offset - char_count
