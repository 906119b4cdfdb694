import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional
from rich.progress import Progress

from hushscan.config.settings import load_config
from hushscan.core.context import context_score, locate
from hushscan.core.detectors.entropy_detector import HighEntropyDetector
from hushscan.core.entropy import entropy_bonus
from hushscan.core.filters import is_excluded, strip_comment_lines, survives_prefilter
from hushscan.core.memory import FindingMemory
from hushscan.core.models import Finding, SecretCandidate, fingerprint
from hushscan.core.registry import RegistryEntry, build_registry

log = logging.getLogger(__name__)

REPORT_THRESHOLD = 8.5


def _parse_size(size_str: str) -> int:
    """Parses a size string (e.g., '5MB', '100KB') into bytes."""
    size_str = size_str.upper().strip()
    units = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}
    try:
        if size_str[-2:] in units:
            num = int(size_str[:-2])
            unit = size_str[-2:]
            return num * units[unit]
        elif size_str[-1] in units:
            num = int(size_str[:-1])
            unit = size_str[-1]
            return num * units[unit]
        return int(size_str)
    except (ValueError, IndexError):
        pass
    return 0 # Default to 0 if parsing fails


class SecretScanner:
    """
    Runs content through the detection pipeline and decides, per candidate,
    whether it is reported.

    A scanner owns its FindingMemory, so a secret is reported at most once per
    scanner instance. Create a new scanner to start a fresh session.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        registry: Optional[List[RegistryEntry]] = None,
        memory: Optional[FindingMemory] = None,
    ):
        """
        Initializes the scanner.

        Args:
            config (Optional[Dict[str, Any]]): A configuration dictionary used to
                                                build the default registry.
            registry (Optional[List[RegistryEntry]]): Overrides the detector/validator registry.
            memory (Optional[FindingMemory]): Overrides the dedup/whitelist store.
        """
        self.registry = registry if registry is not None else build_registry(config or {})
        self.memory = memory if memory is not None else FindingMemory()
        self.entropy_detector = HighEntropyDetector()

    def _evaluate(
        self,
        candidate: SecretCandidate,
        entry: RegistryEntry,
        filtered: str,
        lines: List[str],
        file_id: str,
    ) -> Optional[Finding]:
        """Applies every stage after the dedup check. Returns None on the first failure."""
        secret = candidate.text

        if not survives_prefilter(secret, filtered):
            log.debug("Dropping %s candidate in %s: only found in comments.", entry.secret_type.value, file_id)
            return None

        if is_excluded(secret):
            log.debug("Dropping %s candidate in %s: looks like placeholder data.", entry.secret_type.value, file_id)
            return None

        line_num, line, column = locate(lines, candidate.start)
        score = context_score(line, column) + entropy_bonus(secret)

        if score < REPORT_THRESHOLD:
            log.debug("Dropping %s candidate at %s:%d: score %.1f below threshold.",
                      entry.secret_type.value, file_id, line_num, score)
            return None

        if not entry.validator(secret):
            log.debug("Dropping %s candidate at %s:%d: failed validation.", entry.secret_type.value, file_id, line_num)
            return None

        return Finding(entry.secret_type, secret, file_id, line_num, score)

    def scan_content(
        self,
        content: str,
        file_id: str,
        on_finding: Optional[Callable[[Finding], None]] = None,
    ) -> List[Finding]:
        """
        Scans one content buffer.

        Args:
            content (str): The raw text to scan.
            file_id (str): The identifier reported with each finding, usually a path.
            on_finding: Called with each finding as soon as it is accepted.

        Returns:
            The findings accepted from this content, in detection order.
        """
        findings = []
        filtered = strip_comment_lines(content)
        lines = content.split("\n")

        for entry in self.registry:
            for candidate in entry.detect(content):
                fp = fingerprint(candidate.text)
                if self.memory.should_skip(fp):
                    continue

                finding = self._evaluate(candidate, entry, filtered, lines, file_id)
                if finding is None:
                    continue

                self.memory.record(fp)
                findings.append(finding)
                if on_finding:
                    on_finding(finding)

        return findings

    def high_entropy_tokens(self, content: str) -> List[str]:
        """
        Lists long base64/hex-like words with high entropy.

        This is a diagnostic pass. It does not score, validate, or remember
        anything, and its results are not findings.
        """
        return self.entropy_detector.tokens(content)


class FileScanner:
    """
    Walks a path and feeds every eligible file to a SecretScanner.
    """

    def __init__(
        self,
        root_path: str,
        config: Optional[Dict[str, Any]] = None,
        scanner: Optional[SecretScanner] = None,
    ):
        """
        Initializes the file scanner.

        Args:
            root_path (str): The root directory or file path to scan.
            config (Optional[Dict[str, Any]]): A configuration dictionary. If not
                                                provided, it will be loaded automatically.
            scanner (Optional[SecretScanner]): The content scanner to use. Defaults
                                               to a new one built from ``config``.
        """
        self.root_path = Path(root_path)
        self.config = config if config is not None else load_config()
        self.scanner = scanner if scanner is not None else SecretScanner(config=self.config)

        rules_config = self.config.get("rules") or {}
        self.excluded_paths = rules_config.get("excluded_paths", [])
        self.max_file_size = _parse_size(str(rules_config.get("max_file_size", "0")))
        self.scan_all_files = rules_config.get("scan_all_files", False)
        self.text_extensions = {ext.lower() for ext in rules_config.get("text_extensions", [])}

    def _is_text(self, path: Path) -> bool:
        """Checks the extension allowlist, unless every file should be scanned."""
        if self.scan_all_files:
            return True
        return path.suffix.lower() in self.text_extensions

    def _is_excluded(self, path: Path) -> bool:
        """Checks if a file or directory should be excluded from the scan."""
        for pattern in self.excluded_paths:
            if path.match(pattern):
                return True

        if self.max_file_size > 0 and path.is_file() and path.stat().st_size > self.max_file_size:
            return True

        return False

    def _find_files_to_scan(self) -> Iterator[Path]:
        """Yields all non-excluded text files from the root path."""
        if self.root_path.is_file():
            if self._is_text(self.root_path) and not self._is_excluded(self.root_path):
                yield self.root_path
            return

        for file_path in sorted(self.root_path.rglob("*")):
            try:
                if file_path.is_file() and self._is_text(file_path) and not self._is_excluded(file_path):
                    yield file_path
            except OSError as e:
                log.debug("Skipping %s: %s", file_path, e)

    def _read_file(self, file_path: Path) -> Optional[str]:
        try:
            with file_path.open("r", encoding="utf-8", errors="ignore") as f:
                return f.read()
        except OSError as e:
            # Unreadable files are skipped, they never reach the pipeline
            log.debug("Could not read %s: %s", file_path, e)
            return None

    def iter_contents(self) -> Iterator[tuple]:
        """Yields (path, content) for every readable file under the root."""
        for file_path in self._find_files_to_scan():
            content = self._read_file(file_path)
            if content is not None:
                yield file_path, content

    def scan(
        self,
        progress: Optional[Progress] = None,
        on_finding: Optional[Callable[[Finding], None]] = None,
    ) -> List[Finding]:
        """
        Executes the full scan process, one file at a time.

        1. Finds all relevant files.
        2. Reads each file and runs it through the SecretScanner.
        3. Collects and returns the accepted findings.

        Args:
            progress (Optional[Progress]): A rich Progress object to update during the scan.
            on_finding: Called with each finding as soon as it is accepted.
        """
        findings = []
        files_to_scan = list(self._find_files_to_scan())
        log.debug("Found %d file(s) to scan under %s.", len(files_to_scan), self.root_path)

        task_id = None
        if progress:
            task_id = progress.add_task("Scanning files...", total=len(files_to_scan))

        for file_path in files_to_scan:
            content = self._read_file(file_path)
            if content is not None:
                findings.extend(self.scanner.scan_content(content, str(file_path), on_finding=on_finding))
            if progress and task_id is not None:
                progress.update(task_id, advance=1)

        return findings
