import logging
from datetime import datetime

from lxml import etree

from .config import SUCCESS_STATUS_CODE
from .errors import ResponseError

logger = logging.getLogger(__name__)

DATE_FORMATS = ("%Y-%m-%d", "%Y%m%d")
TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%H%M%S")


def _text(element, path):
    """Stripped text of the first match for path, or None."""
    found = element.find(path)
    if found is None or found.text is None:
        return None
    return found.text.strip() or None


def _first_text(root, xpath):
    matches = root.xpath(xpath)
    if not matches or matches[0].text is None:
        return None
    return matches[0].text.strip() or None


def parse_arrival(date_string, time_string, document=""):
    """Combines an EstimatedArrival Date and Time into one datetime. A missing time means midnight."""
    arrival_date = None
    for date_format in DATE_FORMATS:
        try:
            arrival_date = datetime.strptime(date_string or "", date_format)
            break
        except ValueError:
            continue
    if arrival_date is None:
        raise ResponseError(f"Invalid estimated arrival date from UPS: {date_string!r}", document)

    if not time_string:
        return arrival_date
    for time_format in TIME_FORMATS:
        try:
            arrival_time = datetime.strptime(time_string, time_format).time()
            return datetime.combine(arrival_date.date(), arrival_time)
        except ValueError:
            continue
    raise ResponseError(f"Invalid estimated arrival time from UPS: {time_string!r}", document)


def parse_response(body):
    """
    Converts a raw time in transit response into a map of service codes to
    estimated delivery datetimes.

    Raises ResponseError if the body is not XML or its ResponseStatusCode is
    missing or not 1. ServiceSummary elements without a service code are skipped.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    document = body.decode("utf-8", errors="replace")

    try:
        root = etree.fromstring(body, etree.XMLParser(resolve_entities=False, no_network=True))
    except etree.XMLSyntaxError as e:
        raise ResponseError(f"Invalid response from UPS, not an XML document: {e}", document) from e

    status_code = _first_text(root, "//ResponseStatusCode")
    if status_code != SUCCESS_STATUS_CODE:
        error_code = _first_text(root, "//Error/ErrorCode")
        error_description = _first_text(root, "//Error/ErrorDescription")
        logger.error(f"UPS rejected the request: status={status_code} code={error_code} description={error_description}")
        message = f"Invalid response from UPS (status {status_code})"
        if error_description:
            message += f": {error_description}"
        raise ResponseError(f"{message}\n{document}", document, error_code, error_description)

    delivery_dates = {}
    for summary in root.iter("ServiceSummary"):
        service_code = _text(summary, "Service/Code")
        if not service_code:
            logger.debug("Skipping ServiceSummary without a service code")
            continue
        delivery_dates[service_code] = parse_arrival(
            _text(summary, "EstimatedArrival/Date"),
            _text(summary, "EstimatedArrival/Time"),
            document,
        )
    return delivery_dates
