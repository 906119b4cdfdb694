import math
from collections import Counter

# Candidates at or above this many bits per symbol earn the entropy bonus.
ENTROPY_THRESHOLD = 4.5
ENTROPY_BONUS = 2.0


def shannon_entropy(data: str) -> float:
    """Calculates the Shannon entropy of a string, in bits per character."""
    if not data:
        return 0.0

    char_counts = Counter(data)
    data_len = float(len(data))

    return -sum(count / data_len * math.log2(count / data_len) for count in char_counts.values())


def entropy_bonus(secret: str) -> float:
    """Returns the score bonus a candidate earns from its own entropy."""
    if shannon_entropy(secret) >= ENTROPY_THRESHOLD:
        return ENTROPY_BONUS
    return 0.0
