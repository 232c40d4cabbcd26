class TransitError(Exception):
    """Base class for every error raised by the time in transit client."""


class ConfigurationError(TransitError, ValueError):
    """A required option is missing or an option has an unusable value."""


class TransitTimeoutError(TransitError, TimeoutError):
    """Every attempt, retries included, ran past the configured timeout."""

    def __init__(self, message, attempts):
        super().__init__(message)
        self.attempts = attempts


class RemoteError(TransitError):
    """The service answered with a status other than HTTP 200."""

    def __init__(self, status_code, body):
        super().__init__(f"UPS returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class ResponseError(TransitError):
    """
    A response arrived but was not a successful time in transit reply.

    document holds the raw response text for diagnosis. error_code and
    error_description are copied from the reply's Error element when it has one.
    """

    def __init__(self, message, document, error_code=None, error_description=None):
        super().__init__(message)
        self.document = document
        self.error_code = error_code
        self.error_description = error_description
