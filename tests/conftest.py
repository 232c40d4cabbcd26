"""Shared fixtures for the time in transit client tests."""

from unittest.mock import Mock

import pytest
import requests

from ups_transit.config import Address, ClientConfig, ShipmentRequest


class FakeResponse:
    """Stands in for a streamed requests.Response."""

    def __init__(self, status_code=200, body=b""):
        self.status_code = status_code
        self.body = body
        self.closed = False

    def iter_content(self, chunk_size=1):
        for start in range(0, len(self.body), chunk_size):
            yield self.body[start:start + chunk_size]

    def close(self):
        self.closed = True


SUCCESS_RESPONSE = b"""<?xml version="1.0"?>
<TimeInTransitResponse>
  <Response>
    <TransactionReference><XpciVersion>1.0002</XpciVersion></TransactionReference>
    <ResponseStatusCode>1</ResponseStatusCode>
    <ResponseStatusDescription>Success</ResponseStatusDescription>
  </Response>
  <TransitResponse>
    <ServiceSummary>
      <Service><Code>1DM</Code><Description>UPS Next Day Air Early A.M.</Description></Service>
      <EstimatedArrival>
        <BusinessTransitDays>1</BusinessTransitDays>
        <Time>08:00:00</Time>
        <Date>2024-05-16</Date>
        <DayOfWeek>THU</DayOfWeek>
      </EstimatedArrival>
    </ServiceSummary>
    <ServiceSummary>
      <Service><Code>GND</Code><Description>UPS Ground</Description></Service>
      <EstimatedArrival>
        <BusinessTransitDays>3</BusinessTransitDays>
        <Time>23:00:00</Time>
        <Date>2024-05-20</Date>
        <DayOfWeek>MON</DayOfWeek>
      </EstimatedArrival>
    </ServiceSummary>
  </TransitResponse>
</TimeInTransitResponse>
"""

FAILURE_RESPONSE = b"""<?xml version="1.0"?>
<TimeInTransitResponse>
  <Response>
    <ResponseStatusCode>0</ResponseStatusCode>
    <ResponseStatusDescription>Failure</ResponseStatusDescription>
    <Error>
      <ErrorSeverity>Hard</ErrorSeverity>
      <ErrorCode>250003</ErrorCode>
      <ErrorDescription>Invalid Access License number</ErrorDescription>
    </Error>
  </Response>
</TimeInTransitResponse>
"""


@pytest.fixture
def config():
    return ClientConfig(
        url="https://wwwcie.ups.com/ups.app/xml/TimeInTransit",
        access_license_number="ABC123",
        user_id="shipper",
        password="secret",
        sender=Address(city="Atlanta", state="GA", zip="30301"),
        retry_count=2,
        timeout=5,
    )


@pytest.fixture
def shipment():
    return ShipmentRequest(
        weight=5.5,
        destination=Address(city="Austin", state="TX", zip="78701"),
    )


@pytest.fixture
def session():
    """A requests.Session double whose post() returns a successful response."""
    fake = Mock(spec=requests.Session)
    fake.post.return_value = FakeResponse(200, SUCCESS_RESPONSE)
    return fake
