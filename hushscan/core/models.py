import hashlib
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any


class SecretType(str, Enum):
    """
    The secret families hushscan knows about. The value is the short label
    printed in front of every finding.
    """

    AWS_ACCESS_KEY = "AWS"
    GITHUB_TOKEN = "GitHub"
    GOOGLE_API_KEY = "Google"
    GENERIC_API_KEY = "API"
    DATABASE_URI = "DB"
    PRIVATE_KEY = "Private"
    BEARER_TOKEN = "Bearer"
    CREDIT_CARD = "CC"
    HIGH_ENTROPY = "Entropy"


def fingerprint(secret: str) -> str:
    """
    Returns the 8 hex character fingerprint of a secret.

    Only the first 32 bits of the SHA-256 digest are kept so operators can
    type the hash when whitelisting. Two distinct secrets may share a
    fingerprint; with n secrets in a session the odds are roughly n**2 / 2**33.
    """
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()[:8]


@dataclass(frozen=True)
class SecretCandidate:
    """A raw detector match that has not been scored or validated yet."""

    start: int
    end: int
    text: str
    secret_type: SecretType


@dataclass(frozen=True)
class Finding:
    """A candidate that made it through every stage of the pipeline."""

    secret_type: SecretType
    secret: str
    file: str
    line: int
    score: float

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.secret)

    def format_line(self) -> str:
        return f"{self.secret_type.value}: {self.secret} in {self.file}:{self.line} (score:{self.score:.1f})"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["secret_type"] = self.secret_type.value
        data["fingerprint"] = self.fingerprint
        return data
