import re
from typing import Iterator, List

from hushscan.core.entropy import shannon_entropy, ENTROPY_THRESHOLD
from hushscan.core.models import SecretCandidate, SecretType


class HighEntropyDetector:
    """
    A detector that finds long, high-entropy words which look like base64 or
    hex blobs, independent of any provider format.
    """

    def __init__(self, threshold: float = ENTROPY_THRESHOLD, min_length: int = 20):
        """
        Initializes the detector.

        Args:
            threshold (float): The Shannon entropy threshold to consider a word suspicious.
            min_length (int): The minimum length of a word to check for entropy.
        """
        self.threshold = threshold
        self.min_length = min_length
        self.word_regex = re.compile(r"\S+")
        self.b64_regex = re.compile(r"[A-Za-z0-9+/]{20,}={0,2}")
        self.hex_regex = re.compile(r"[0-9a-fA-F]{32,}")

    def _is_suspect(self, word: str) -> bool:
        if len(word) < self.min_length or shannon_entropy(word) < self.threshold:
            return False
        return bool(self.b64_regex.search(word) or self.hex_regex.search(word))

    def detect(self, content: str) -> Iterator[SecretCandidate]:
        """
        Walks the whitespace-delimited words of the content.

        Yields:
            A SecretCandidate for every suspicious word.
        """
        for match in self.word_regex.finditer(content):
            word = match.group(0)
            if self._is_suspect(word):
                yield SecretCandidate(match.start(), match.end(), word, SecretType.HIGH_ENTROPY)

    def tokens(self, content: str) -> List[str]:
        """Returns the suspicious words themselves, in content order."""
        return [candidate.text for candidate in self.detect(content)]

    def __repr__(self) -> str:
        return "HighEntropyDetector()"
