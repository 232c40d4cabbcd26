from datetime import datetime

import pytest

from conftest import FAILURE_RESPONSE, SUCCESS_RESPONSE
from ups_transit.errors import ResponseError
from ups_transit.response_parser import parse_arrival, parse_response


def summary(code, arrival_date="2024-05-17", arrival_time="12:00:00"):
    service = f"<Service><Code>{code}</Code></Service>" if code is not None else "<Service/>"
    return (
        f"<ServiceSummary>{service}<EstimatedArrival>"
        f"<Time>{arrival_time}</Time><Date>{arrival_date}</Date>"
        f"</EstimatedArrival></ServiceSummary>"
    )


def response(status, *summaries):
    return (
        f"<TimeInTransitResponse><Response><ResponseStatusCode>{status}</ResponseStatusCode></Response>"
        f"<TransitResponse>{''.join(summaries)}</TransitResponse></TimeInTransitResponse>"
    ).encode("utf-8")


def test_success_maps_each_service_code():
    assert parse_response(SUCCESS_RESPONSE) == {
        "1DM": datetime(2024, 5, 16, 8, 0),
        "GND": datetime(2024, 5, 20, 23, 0),
    }


def test_summary_without_service_code_is_skipped():
    body = response(1, summary("01"), summary(None), summary(""), summary("03", "2024-05-21"))
    assert parse_response(body) == {
        "01": datetime(2024, 5, 17, 12, 0),
        "03": datetime(2024, 5, 21, 12, 0),
    }


def test_no_summaries_is_an_empty_map():
    assert parse_response(response(1)) == {}


def test_status_zero_raises_with_error_details():
    with pytest.raises(ResponseError) as excinfo:
        parse_response(FAILURE_RESPONSE)
    error = excinfo.value
    assert error.error_code == "250003"
    assert error.error_description == "Invalid Access License number"
    assert "<ResponseStatusCode>0</ResponseStatusCode>" in error.document
    assert "Invalid Access License number" in str(error)


def test_plain_status_zero_raises():
    with pytest.raises(ResponseError):
        parse_response(response(0, summary("01")))


def test_missing_status_raises():
    with pytest.raises(ResponseError):
        parse_response(b"<TimeInTransitResponse><TransitResponse/></TimeInTransitResponse>")


def test_status_is_whitespace_tolerant():
    assert parse_response(response(" 1 ", summary("01"))) == {"01": datetime(2024, 5, 17, 12, 0)}


def test_not_xml_raises_response_error():
    with pytest.raises(ResponseError) as excinfo:
        parse_response(b"<html><body>Service unavailable")
    assert "Service unavailable" in excinfo.value.document


def test_accepts_text_body():
    assert parse_response(response(1, summary("01")).decode("utf-8")) == {"01": datetime(2024, 5, 17, 12, 0)}


def test_duplicate_service_code_keeps_last():
    body = response(1, summary("01", "2024-05-17"), summary("01", "2024-05-18"))
    assert parse_response(body) == {"01": datetime(2024, 5, 18, 12, 0)}


@pytest.mark.parametrize("arrival_date, arrival_time, expected", [
    ("2024-05-17", "23:00:00", datetime(2024, 5, 17, 23, 0)),
    ("20240517", "230000", datetime(2024, 5, 17, 23, 0)),
    ("2024-05-17", "10:30", datetime(2024, 5, 17, 10, 30)),
    ("2024-05-17", None, datetime(2024, 5, 17)),
])
def test_parse_arrival(arrival_date, arrival_time, expected):
    assert parse_arrival(arrival_date, arrival_time) == expected


@pytest.mark.parametrize("arrival_date, arrival_time", [
    ("next tuesday", "10:00:00"),
    (None, "10:00:00"),
    ("2024-05-17", "noon"),
])
def test_parse_arrival_rejects_garbage(arrival_date, arrival_time):
    with pytest.raises(ResponseError):
        parse_arrival(arrival_date, arrival_time)


def test_entities_from_the_response_are_not_expanded():
    body = (
        b'<?xml version="1.0"?>'
        b'<!DOCTYPE TimeInTransitResponse [<!ENTITY svc "EXPANDED">]>'
        b"<TimeInTransitResponse><Response><ResponseStatusCode>1</ResponseStatusCode></Response>"
        b"<TransitResponse><ServiceSummary><Service><Code>&svc;</Code></Service>"
        b"<EstimatedArrival><Time>12:00:00</Time><Date>2024-05-17</Date></EstimatedArrival>"
        b"</ServiceSummary></TransitResponse></TimeInTransitResponse>"
    )
    assert "EXPANDED" not in parse_response(body)
