import logging
from collections.abc import Mapping
from datetime import datetime

from .config import ClientConfig, ShipmentRequest
from .pickup import calculate_pickup_date
from .response_parser import parse_response
from .transport import send_request
from .xml_builder import build_access_request, build_request, generate_xml

logger = logging.getLogger(__name__)


class TimeInTransit:
    """
    Simple client for the UPS time in transit service.

    The config is read-only once the client is built and each call to
    request() builds its own document. A session passed in is used as is;
    callers sharing one client across threads are responsible for that
    session being safe to share.
    """

    def __init__(self, config: ClientConfig, session=None, clock=datetime.now):
        self.config = config
        self.session = session
        self.clock = clock
        self.access_xml = generate_xml(build_access_request(config))

    @classmethod
    def from_options(cls, session=None, clock=datetime.now, **options):
        return cls(ClientConfig.from_options(options), session=session, clock=clock)

    def pickup_date(self):
        """Pickup date a request made right now would use."""
        return calculate_pickup_date(self.clock(), self.config.order_cutoff_time)

    def request(self, shipment):
        """
        Requests time in transit information for a shipment, given either as a
        ShipmentRequest or as a mapping of the flat shipment options (weight,
        city, state, zip, ...).

        Returns a dict of service code to estimated delivery datetime. Raises a
        TransitError subclass if the request is unsuccessful.
        """
        if isinstance(shipment, Mapping):
            shipment = ShipmentRequest.from_options(shipment)

        pickup_date = self.pickup_date()
        destination = shipment.destination
        logger.info(f"Requesting time in transit to {destination.city}, {destination.state} {destination.zip} "
                    f"(pickup {pickup_date:%Y-%m-%d})")

        payload = build_request(self.config, shipment, pickup_date, access_xml=self.access_xml)
        body = send_request(
            self.config.url,
            payload,
            timeout=self.config.timeout,
            retry_count=self.config.retry_count,
            verify=self.config.verify_ssl,
            session=self.session,
        )
        delivery_dates = parse_response(body)

        logger.info(f"Received {len(delivery_dates)} service estimate(s)")
        return delivery_dates
