import re

COMMENT_PREFIXES = ("//", "#")
HTML_COMMENT_OPENER = "<!--"

# Words that mark a value as documentation or fixture data rather than a live secret.
EXCLUDED_WORDS = ("example", "test", "dummy", "fake", "sample", "placeholder")
_EXCLUDE_REGEX = re.compile("|".join(EXCLUDED_WORDS), re.IGNORECASE)


def strip_comment_lines(content: str) -> str:
    """
    Removes comment-only lines from the content.

    A line is dropped when its stripped text starts with a single-line comment
    marker, or when it contains an HTML/XML comment opener anywhere. Lines
    are split on "\\n" only, with one trailing "\\r" removed, so other control
    characters stay inside their line.
    """
    kept = []
    for line in content.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        stripped = line.strip()
        if stripped.startswith(COMMENT_PREFIXES) or HTML_COMMENT_OPENER in line:
            continue
        kept.append(line)
    return "\n".join(kept)


def survives_prefilter(secret: str, filtered_content: str) -> bool:
    """
    Checks that the secret still appears somewhere after comments are stripped.

    This is a containment test on the text, not on the specific occurrence:
    a secret that is commented out in one place and live in another passes.
    """
    return secret in filtered_content


def is_excluded(secret: str) -> bool:
    """Returns True if the secret text looks like placeholder or test data."""
    return bool(_EXCLUDE_REGEX.search(secret))
