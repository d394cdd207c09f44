# Entrius 2025
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import bittensor as bt
import requests

from dependabot_approve.constants import (
    BASE_GITHUB_API_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    GET_RETRY_ATTEMPTS,
    GITHUB_ACCEPT_HEADER,
    RETRY_DELAY_SECONDS,
)
from dependabot_approve.exceptions import ApiError
from dependabot_approve.utils.utils import mask_secret

# Warn once fewer requests than this remain in the window
RATE_LIMIT_LOW_WATERMARK = 10

_RATE_LIMIT_HEADERS = {
    'limit': 'X-RateLimit-Limit',
    'remaining': 'X-RateLimit-Remaining',
    'reset_timestamp': 'X-RateLimit-Reset',
    'used': 'X-RateLimit-Used',
}


@dataclass(frozen=True)
class RateLimitInfo:
    """The ``X-RateLimit-*`` headers of one response."""

    limit: int
    remaining: int
    reset_timestamp: int
    used: int

    @property
    def is_exceeded(self) -> bool:
        return self.remaining == 0

    @property
    def seconds_until_reset(self) -> int:
        return max(0, self.reset_timestamp - int(time.time()))

    def __str__(self) -> str:
        return f"{self.remaining}/{self.limit} requests left, resets in {self.seconds_until_reset}s"


def parse_rate_limit_headers(response: requests.Response) -> Optional[RateLimitInfo]:
    """Read the rate limit headers, or None when GitHub did not send usable ones."""
    try:
        values = {field: int(response.headers.get(header, 0)) for field, header in _RATE_LIMIT_HEADERS.items()}
    except (ValueError, TypeError) as e:
        bt.logging.debug(f"Ignoring malformed rate limit headers: {e}")
        return None

    if not values['limit'] and not values['reset_timestamp']:
        return None
    return RateLimitInfo(**values)


def is_rate_limited(response: requests.Response) -> Tuple[bool, Optional[int]]:
    """
    Tell whether a failed response was caused by rate limiting.

    The wait is only reported, never slept on.

    Returns:
        Tuple of (is_rate_limited, seconds_until_reset). The seconds are None
        when the response does not advertise a reset time.
    """
    if response.status_code != 429 and response.status_code != 403:
        return (False, None)

    info = parse_rate_limit_headers(response)
    if info is not None and info.is_exceeded:
        return (True, info.seconds_until_reset)
    if 'rate limit' in (response.text or '').lower():
        return (True, info.seconds_until_reset if info else None)
    return (False, None)


def warn_if_rate_limit_low(response: requests.Response) -> None:
    info = parse_rate_limit_headers(response)
    if info is not None and info.remaining <= RATE_LIMIT_LOW_WATERMARK:
        bt.logging.warning(f"GitHub API rate limit nearly used up: {info}")


def make_headers(token: str, user_agent: str = DEFAULT_USER_AGENT) -> Dict[str, str]:
    """Build standard GitHub HTTP headers for a bearer token.

    Args:
        token (str): Github pat
        user_agent (str): Value for the User-Agent header
    Returns:
        Dict[str, str]: Mapping of HTTP header names to values.
    """
    return {
        "Authorization": f"Bearer {token}",
        "Accept": GITHUB_ACCEPT_HEADER,
        "User-Agent": user_agent,
    }


def describe_failure(response: requests.Response) -> str:
    """Turn a non-success response into a short human readable cause."""
    rate_limited, seconds = is_rate_limited(response)
    if rate_limited:
        if seconds is None:
            return "rate limited"
        return f"rate limited, resets in {seconds}s"
    if response.status_code == 401:
        return "authentication rejected"
    if response.status_code == 404:
        return "not found"

    try:
        message = response.json().get('message')
    except (ValueError, AttributeError):
        message = None
    return message or (response.text or '')[:200] or response.reason or "request failed"


class GitHubClient:
    """Authenticated GitHub REST client. Owns the credential for the run.

    GET requests retry transport errors; POST and PUT requests are sent once.
    Every request carries a finite timeout and a timed out call surfaces as
    ApiError with no status.
    """

    def __init__(
        self,
        token: str,
        user_agent: str = DEFAULT_USER_AGENT,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or BASE_GITHUB_API_URL).rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(make_headers(token, user_agent))
        bt.logging.debug(f"GitHub client for {self.base_url} using token {mask_secret(token)}")

    def __enter__(self) -> 'GitHubClient':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self.request('GET', path, params=params)
        return self._decode(response, f"GET {path}")

    def get_text(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """Return the raw body of a successful GET, for callers that dump it."""
        return self.request('GET', path, params=params).text

    def post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        response = self.request('POST', path, json=payload)
        return self._decode(response, f"POST {path}")

    def put_json(self, path: str, payload: Dict[str, Any]) -> Any:
        response = self.request('PUT', path, json=payload)
        return self._decode(response, f"PUT {path}")

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Send a request and return the response, raising ApiError unless it is 2xx."""
        operation = f"{method} {path}"
        url = f"{self.base_url}{path}"
        attempts = GET_RETRY_ATTEMPTS if method == 'GET' else 1

        for attempt in range(attempts):
            bt.logging.debug(f"{method} {url} (attempt {attempt + 1}/{attempts})")
            try:
                response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            except requests.exceptions.Timeout:
                error = ApiError(operation, f"timed out after {self.timeout}s")
            except requests.exceptions.RequestException as e:
                error = ApiError(operation, f"connection error: {e}")
            else:
                warn_if_rate_limit_low(response)
                if 200 <= response.status_code < 300:
                    if attempt:
                        bt.logging.debug(f"{operation} succeeded after {attempt + 1} attempts")
                    return response
                raise ApiError(operation, describe_failure(response), status=response.status_code)

            if attempt < attempts - 1:
                bt.logging.warning(f"{error} (attempt {attempt + 1}/{attempts}), retrying in {RETRY_DELAY_SECONDS}s...")
                time.sleep(RETRY_DELAY_SECONDS)

        raise error

    @staticmethod
    def _decode(response: requests.Response, operation: str) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(operation, f"invalid JSON response: {e}", status=response.status_code)
