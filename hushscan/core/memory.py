from typing import Iterable, Optional, Set


class FindingMemory:
    """
    Remembers which secrets were already reported or explicitly whitelisted
    during one scan session. Keyed by fingerprint. Nothing is evicted and
    nothing is written to disk.
    """

    def __init__(self, whitelist: Optional[Iterable[str]] = None):
        self.found: Set[str] = set()
        self.whitelist: Set[str] = set()
        for fp in whitelist or ():
            self.allow(fp)

    def allow(self, fp: str) -> None:
        """Whitelists a fingerprint so matching secrets are never reported."""
        self.whitelist.add(fp.strip())

    def should_skip(self, fp: str) -> bool:
        return fp in self.found or fp in self.whitelist

    def record(self, fp: str) -> None:
        self.found.add(fp)
