import logging
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional

from hushscan.core.detectors.entropy_detector import HighEntropyDetector
from hushscan.core.detectors.pattern_detector import PatternDetector
from hushscan.core.models import SecretCandidate, SecretType
from hushscan.core.validators import (
    GitHubTokenValidator,
    accept,
    luhn_valid,
    validate_aws_key,
)

log = logging.getLogger(__name__)


class RegistryEntry(NamedTuple):
    """One secret family: how to find it and how to confirm it."""

    secret_type: SecretType
    detector: Any
    validator: Callable[[str], bool]

    def detect(self, content: str) -> Iterator[SecretCandidate]:
        return self.detector.detect(content)


# Config name -> secret type, in the order the scanner runs them.
DETECTOR_NAMES: Dict[str, SecretType] = {
    "aws": SecretType.AWS_ACCESS_KEY,
    "github": SecretType.GITHUB_TOKEN,
    "google": SecretType.GOOGLE_API_KEY,
    "api_key": SecretType.GENERIC_API_KEY,
    "database_uri": SecretType.DATABASE_URI,
    "private_key": SecretType.PRIVATE_KEY,
    "bearer": SecretType.BEARER_TOKEN,
    "credit_card": SecretType.CREDIT_CARD,
    "high_entropy": SecretType.HIGH_ENTROPY,
}


def _mapping(value: Any) -> Dict[str, Any]:
    """Returns value if it is a mapping, otherwise an empty one."""
    return value if isinstance(value, dict) else {}


def _make_entry(secret_type: SecretType, config: Dict[str, Any]) -> RegistryEntry:
    if secret_type is SecretType.HIGH_ENTROPY:
        detector = HighEntropyDetector()
    else:
        detector = PatternDetector(secret_type)

    if secret_type is SecretType.AWS_ACCESS_KEY:
        validator = validate_aws_key
    elif secret_type is SecretType.GITHUB_TOKEN:
        github_config = _mapping(_mapping(config.get("validation")).get("github"))
        kwargs = {k: github_config[k] for k in ("endpoint", "timeout") if k in github_config}
        validator = GitHubTokenValidator(**kwargs)
    elif secret_type is SecretType.CREDIT_CARD:
        validator = luhn_valid
    else:
        validator = accept

    return RegistryEntry(secret_type, detector, validator)


def build_registry(config: Optional[Dict[str, Any]] = None) -> List[RegistryEntry]:
    """
    Builds the ordered list of (type, detector, validator) entries.

    Every detector is included unless ``rules.detectors.<name>.enabled`` is
    false. A detector missing from the config is treated as enabled, except
    ``high_entropy``, which must be switched on explicitly.
    """
    config = config or {}
    detectors_config = _mapping(_mapping(config.get("rules")).get("detectors"))

    registry = []
    for name, secret_type in DETECTOR_NAMES.items():
        default_enabled = secret_type is not SecretType.HIGH_ENTROPY
        if not _mapping(detectors_config.get(name)).get("enabled", default_enabled):
            log.debug("Detector '%s' is disabled.", name)
            continue
        registry.append(_make_entry(secret_type, config))
    return registry
