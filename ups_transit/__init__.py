from .config import Address, ClientConfig, ShipmentRequest
from .errors import (
    ConfigurationError, RemoteError, ResponseError, TransitError, TransitTimeoutError,
)
from .pickup import calculate_pickup_date
from .response_parser import parse_response
from .time_in_transit import TimeInTransit
from .transport import send_request
from .xml_builder import build_request

__all__ = [
    "Address",
    "ClientConfig",
    "ShipmentRequest",
    "TimeInTransit",
    "calculate_pickup_date",
    "build_request",
    "send_request",
    "parse_response",
    "TransitError",
    "ConfigurationError",
    "TransitTimeoutError",
    "RemoteError",
    "ResponseError",
]
