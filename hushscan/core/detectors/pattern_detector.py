import re
from typing import Iterator, Dict, Union

from hushscan.core.models import SecretCandidate, SecretType

# One structural pattern per secret family, tuned to the provider's literal format.
BUILTIN_PATTERNS: Dict[SecretType, "re.Pattern[str]"] = {
    SecretType.AWS_ACCESS_KEY: re.compile(r"AKIA[0-9A-Z]{16}"),
    SecretType.GITHUB_TOKEN: re.compile(r"ghp_[a-zA-Z0-9]{36}"),
    SecretType.GOOGLE_API_KEY: re.compile(r"AIza[0-9A-Za-z\-_]{35}"),
    SecretType.GENERIC_API_KEY: re.compile(r"""api[_-]?key['":\s=]+[a-zA-Z0-9\-_]{20,}""", re.IGNORECASE),
    SecretType.DATABASE_URI: re.compile(r"""(mongodb|postgresql|mysql)://[^\s'"]+""", re.IGNORECASE),
    SecretType.PRIVATE_KEY: re.compile(r"-----BEGIN.*PRIVATE KEY-----"),
    SecretType.BEARER_TOKEN: re.compile(r"Bearer\s+[a-zA-Z0-9\-._~+/]+=*"),
    # Visa, Mastercard, Amex and Discover digit layouts.
    SecretType.CREDIT_CARD: re.compile(
        r"\b(?:4\d{15}|5[1-5]\d{14}|3[47]\d{13}|6(?:011|5\d{2})\d{12})\b", re.ASCII
    ),
}


class PatternDetector:
    """
    A detector that finds one family of secrets with a single fixed regex.
    """

    def __init__(self, secret_type: SecretType, pattern: Union[str, "re.Pattern[str]", None] = None):
        """
        Initializes the detector.

        Args:
            secret_type (SecretType): The family every match is reported as.
            pattern: A regex (string or compiled). Defaults to the built-in
                     pattern for ``secret_type``.
        """
        self.secret_type = secret_type
        if pattern is None:
            pattern = BUILTIN_PATTERNS[secret_type]
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def detect(self, content: str) -> Iterator[SecretCandidate]:
        """
        Scans the whole content for matches. Matches may span lines, so the
        regex runs over the full buffer rather than line by line.

        Yields:
            A SecretCandidate for every non-overlapping match.
        """
        for match in self.pattern.finditer(content):
            yield SecretCandidate(match.start(), match.end(), match.group(0), self.secret_type)

    def __repr__(self) -> str:
        return f"PatternDetector({self.secret_type.value!r})"
