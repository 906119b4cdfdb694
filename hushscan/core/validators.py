import logging
import requests

log = logging.getLogger(__name__)

GITHUB_USER_ENDPOINT = "https://api.github.com/user"
DEFAULT_TIMEOUT = 2.0


def accept(secret: str) -> bool:
    """Validator for families whose detector regex already encodes the format."""
    return True


def validate_aws_key(secret: str) -> bool:
    """AWS access key IDs are exactly 20 characters and start with AKIA."""
    return len(secret) == 20 and secret.startswith("AKIA")


def luhn_valid(number: str) -> bool:
    """
    Runs the Luhn checksum over a string of digits.

    Every second digit from the right is doubled, and doubled values above 9
    have their digits summed. The number is valid if the total ends in 0.
    """
    total = 0
    for index, char in enumerate(reversed(number)):
        if char not in "0123456789":
            return False
        digit = int(char)
        if index % 2 == 1:
            digit *= 2
            if digit > 9:
                digit = digit % 10 + digit // 10
        total += digit
    return total % 10 == 0


class GitHubTokenValidator:
    """
    Checks a GitHub token against the live API.

    This is the only validator with side effects: it sends the candidate as a
    credential to GitHub and blocks for up to ``timeout`` seconds.
    """

    def __init__(self, endpoint: str = GITHUB_USER_ENDPOINT, timeout: float = DEFAULT_TIMEOUT):
        """
        Initializes the validator.

        Args:
            endpoint (str): The authenticated endpoint to probe.
            timeout (float): Seconds to wait for the API before giving up.
        """
        self.endpoint = endpoint
        self.timeout = timeout

    def __call__(self, secret: str) -> bool:
        """
        Returns False if the request fails or the API answers 401 Unauthorized.
        Every other response counts as a live token. Failures are not retried.
        """
        headers = {"Authorization": f"token {secret}"}
        try:
            response = requests.get(self.endpoint, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            log.debug("GitHub token check failed: %s", e)
            return False

        if response.status_code == 401:
            log.debug("GitHub rejected token as unauthorized.")
            return False
        return True
