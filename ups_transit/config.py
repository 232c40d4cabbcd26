from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union
from urllib.parse import urlparse

from .errors import ConfigurationError

# --- Protocol Details ---
XPCI_VERSION = "1.0002"
REQUEST_ACTION = "TimeInTransit"
SUCCESS_STATUS_CODE = "1"

# --- Defaults ---
DEFAULT_CUTOFF_TIME = 14
DEFAULT_TIMEOUT = 30
DEFAULT_RETRY_COUNT = 3
DEFAULT_COUNTRY_CODE = "US"
DEFAULT_UNIT_OF_MEASUREMENT = "LBS"
DEFAULT_TOTAL_PACKAGES = 1

CLIENT_OPTIONS = (
    "url", "access_license_number", "user_id", "password", "order_cutoff_time",
    "sender_city", "sender_state", "sender_zip", "sender_country_code",
    "retry_count", "timeout", "verify_ssl",
)
SHIPMENT_OPTIONS = (
    "total_packages", "unit_of_measurement", "weight",
    "city", "state", "zip", "country_code",
)


def _check_options(options, allowed, kind):
    unknown = sorted(set(options) - set(allowed))
    if unknown:
        raise ConfigurationError(f"Unknown {kind} option(s): {', '.join(unknown)}")


def _present(options, key):
    """One-item kwargs dict for key, or {} when the option is unset so the field default applies."""
    return {key: options[key]} if options.get(key) is not None else {}


@dataclass(frozen=True)
class Address:
    """A city/state/zip/country block, used for both the sender and the destination."""
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country_code: Optional[str] = None


@dataclass(frozen=True)
class ClientConfig:
    """
    Everything the client needs that does not change between requests.

    url, access_license_number, user_id and password are required. The
    order cutoff time is an hour of the day; requests made after it use the
    next business day as the pickup date. retry_count is the number of
    additional attempts made when a request times out. verify_ssl may be
    False or a CA bundle path; the default is strict certificate checking.
    """
    url: str
    access_license_number: str
    user_id: str
    password: str = field(repr=False)
    sender: Address = field(default_factory=Address)
    order_cutoff_time: int = DEFAULT_CUTOFF_TIME
    timeout: float = DEFAULT_TIMEOUT
    retry_count: int = DEFAULT_RETRY_COUNT
    verify_ssl: Union[bool, str] = True

    def __post_init__(self):
        for name in ("url", "access_license_number", "user_id", "password"):
            if not getattr(self, name):
                raise ConfigurationError(f"Missing required option: {name}")

        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(f"Invalid service url: {self.url!r}")
        try:
            parsed.port
        except ValueError as e:
            raise ConfigurationError(f"Invalid service url: {self.url!r} ({e})") from e

        if isinstance(self.order_cutoff_time, bool) or not isinstance(self.order_cutoff_time, int) \
                or not 0 <= self.order_cutoff_time <= 23:
            raise ConfigurationError(f"order_cutoff_time must be an hour between 0 and 23, got {self.order_cutoff_time!r}")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout <= 0:
            raise ConfigurationError(f"timeout must be a positive number of seconds, got {self.timeout!r}")
        if isinstance(self.retry_count, bool) or not isinstance(self.retry_count, int) or self.retry_count < 0:
            raise ConfigurationError(f"retry_count must be a non-negative integer, got {self.retry_count!r}")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "ClientConfig":
        """Builds a config from the flat option names (sender_city, retry_count, ...)."""
        _check_options(options, CLIENT_OPTIONS, "client")
        sender = Address(
            city=options.get("sender_city"),
            state=options.get("sender_state"),
            zip=options.get("sender_zip"),
            country_code=options.get("sender_country_code"),
        )
        kwargs = {}
        for name in ("order_cutoff_time", "timeout", "retry_count", "verify_ssl"):
            kwargs.update(_present(options, name))
        return cls(
            url=options.get("url"),
            access_license_number=options.get("access_license_number"),
            user_id=options.get("user_id"),
            password=options.get("password"),
            sender=sender,
            **kwargs,
        )


@dataclass(frozen=True)
class ShipmentRequest:
    """Per-call shipment description. Unset package count and unit are defaulted when the request is built."""
    weight: Any
    destination: Address = field(default_factory=Address)
    total_packages: Optional[int] = None
    unit_of_measurement: Optional[str] = None

    def __post_init__(self):
        if self.weight is None or self.weight == "":
            raise ConfigurationError("Missing required option: weight")

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "ShipmentRequest":
        _check_options(options, SHIPMENT_OPTIONS, "shipment")
        return cls(
            weight=options.get("weight"),
            destination=Address(
                city=options.get("city"),
                state=options.get("state"),
                zip=options.get("zip"),
                country_code=options.get("country_code"),
            ),
            total_packages=options.get("total_packages"),
            unit_of_measurement=options.get("unit_of_measurement"),
        )

