import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from urllib.parse import urlparse, urlunparse

import requests
from urllib3.exceptions import ReadTimeoutError

from .config import DEFAULT_RETRY_COUNT, DEFAULT_TIMEOUT
from .errors import RemoteError, TransitTimeoutError

logger = logging.getLogger(__name__)

HTTPS_PORT = 443
HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}
CHUNK_SIZE = 8192


def secure_url(url):
    """Switches a plain http url that targets port 443 over to https."""
    parsed = urlparse(url)
    if parsed.scheme == "http" and parsed.port == HTTPS_PORT:
        return urlunparse(parsed._replace(scheme="https"))
    return url


def _read_body(response):
    """Reads the streamed body. requests reports a stalled body as a ConnectionError, so that case is turned back into a timeout."""
    try:
        return b"".join(response.iter_content(CHUNK_SIZE))
    except requests.exceptions.ConnectionError as e:
        if e.args and isinstance(e.args[0], ReadTimeoutError):
            raise requests.exceptions.ReadTimeout(*e.args, request=e.request, response=e.response) from e
        raise


class _Attempt:
    """One POST, run on a worker thread so the caller can walk away from it once the deadline passes."""

    def __init__(self, session, url, payload, timeout, verify):
        self.session = session
        self.url = url
        self.payload = payload
        self.timeout = timeout
        self.verify = verify
        self.response = None

    def __call__(self):
        response = self.session.post(
            self.url, data=self.payload, headers=HEADERS, timeout=self.timeout, verify=self.verify, stream=True,
        )
        self.response = response
        try:
            body = _read_body(response)
        finally:
            response.close()
        return response.status_code, body

    def abandon(self):
        # Closing the response drops its connection, which unblocks a worker stuck reading the body.
        if self.response is not None:
            self.response.close()


def _run_attempt(session, url, payload, timeout, verify):
    """Runs one attempt under a single deadline covering connect, send and receive."""
    attempt = _Attempt(session, url, payload, timeout, verify)
    executor = ThreadPoolExecutor(max_workers=1)
    try:
        future = executor.submit(attempt)
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError as e:
            attempt.abandon()
            raise requests.exceptions.Timeout(f"No complete response within {timeout}s") from e
    finally:
        executor.shutdown(wait=False)


def send_request(url, payload, timeout=DEFAULT_TIMEOUT, retry_count=DEFAULT_RETRY_COUNT, verify=True, session=None):
    """
    POSTs payload to url and returns the raw response body.

    Each attempt, from connecting to reading the last byte, must finish within
    timeout seconds. Timed out attempts are retried up to retry_count more
    times before TransitTimeoutError is raised, so the call blocks for at most
    (retry_count + 1) * timeout seconds. A non-200 status raises RemoteError
    straight away, and any other failure (bad url, refused connection)
    propagates without a retry.
    """
    url = secure_url(url)
    if verify is False and url.startswith("https"):
        logger.warning(f"TLS certificate verification is disabled for {url}")

    own_session = session is None
    if own_session:
        session = requests.Session()

    try:
        attempts = 0
        while True:
            attempts += 1
            try:
                status_code, body = _run_attempt(session, url, payload, timeout, verify)
            except requests.Timeout as e:
                logger.warning(f"Attempt {attempts} of {retry_count + 1} to {url} timed out after {timeout}s")
                if attempts > retry_count:
                    logger.error(f"Giving up on {url} after {attempts} timed out attempts")
                    raise TransitTimeoutError(f"No response from {url} after {attempts} attempts", attempts) from e
                continue

            if status_code != 200:
                logger.error(f"UPS returned HTTP {status_code} for {url}")
                raise RemoteError(status_code, body)
            return body
    finally:
        if own_session:
            session.close()
