"""Client-side request construction and response rendering."""

from typing import Iterable, Optional, Sequence

from protocol.commands import RequestCode
from protocol.constants import BOUNDED_INT_MAX, LAP_STARTED_TEXT
from protocol.messages import (
    BoundedIntPayload,
    Request,
    ResponsePayload,
    TextPayload,
)
from timekeeping.zones import normalize_city

EXIT_CHOICE = 0

MENU = """
Select a request type:
===============================

0. Exit
1. Current date and time
2. Time only (no date)
3. Seconds since epoch
4. Client-to-server delay
5. Round-trip time (RTT)
6. Time without seconds
7. Current year
8. Month and day
9. Seconds since month start
10. Week number of year
11. Daylight savings status
12. Time in another city
13. Measure time lap
"""

CITY_MENU = """
Choose a city from the following list:
=========================================

 1. Doha (Qatar)
 2. Prague (Czech Republic)
 3. New-York (USA)
 4. Berlin (Germany)
 5. UTC (default)
"""

# Requests answered by repeated cycles and reported as an average
AGGREGATE_CODES = (
    RequestCode.GET_CLIENT_TO_SERVER_DELAY_ESTIMATION,
    RequestCode.MEASURE_RTT,
)

_TEXT_LABELS = {
    RequestCode.GET_TIME: "The time and date are",
    RequestCode.GET_TIME_WITHOUT_DATE: "The time is",
    RequestCode.GET_TIME_WITHOUT_DATE_OR_SECONDS: "The time is",
    RequestCode.GET_YEAR: "The year is",
    RequestCode.GET_MONTH_AND_DAY: "The month and day are",
}

_INT_LABELS = {
    RequestCode.GET_TIME_SINCE_EPOCH: "Seconds since epoch",
    RequestCode.GET_SECONDS_SINCE_BEGINNING_OF_MONTH: "Seconds since beginning of month",
    RequestCode.GET_WEEK_OF_YEAR: "Week of the year",
}


def parse_menu_choice(text: str) -> int:
    """
    Parse a menu selection.

    Accepts at most two digits naming 0 (exit) or a request code 1-13.

    Raises:
        ValueError: If the input is not a valid choice
    """
    text = text.strip()
    if not text or len(text) > 2 or not text.isdigit():
        raise ValueError("Please enter a number between 0 and 13 (max two digits).")
    choice = int(text)
    if choice > RequestCode.MEASURE_TIME_LAP:
        raise ValueError("Please select a valid option (1-13) or 0 to exit.")
    return choice


def build_request(choice: int, city: Optional[str] = None) -> Request:
    """
    Build the request for a menu choice.

    Args:
        choice: Request code number (1-13)
        city: City input, used by GET_TIME_WITHOUT_DATE_IN_CITY only

    Raises:
        ValueError: If choice is not a request code
    """
    if not 1 <= choice <= RequestCode.MEASURE_TIME_LAP:
        raise ValueError(f"Invalid request choice: {choice}")
    code = RequestCode(choice)
    if code == RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY:
        return Request(code=code, params=[normalize_city(city or "")])
    return Request(code=code)


def render(request: Request, payload: ResponsePayload) -> str:
    """Format a single response for display."""
    code = request.code
    if code in _TEXT_LABELS and isinstance(payload, TextPayload):
        return f"{_TEXT_LABELS[code]}: {payload.text}"
    if code in _INT_LABELS and isinstance(payload, BoundedIntPayload):
        return f"{_INT_LABELS[code]}: {payload.value}"
    if code == RequestCode.GET_DAYLIGHT_SAVINGS and isinstance(payload, TextPayload):
        state = "Daylight Saving Time" if payload.text == "1" else "Standard Time"
        return f"It is currently {state}."
    if code == RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY and isinstance(payload, TextPayload):
        city = request.params[0] if request.params else "utc"
        return f"The time in {city} is: {payload.text}"
    if code == RequestCode.MEASURE_TIME_LAP and isinstance(payload, TextPayload):
        if payload.text == LAP_STARTED_TEXT:
            return "Timer started. Send the same request again to stop the timer."
        return f"Time elapsed since the timer was started: {payload.text}"
    raise ValueError(f"Cannot render {payload!r} for request {code!r}")


def render_aggregate(code: RequestCode, average_ms: float) -> str:
    """Format the result of a delay or RTT measurement."""
    if code == RequestCode.GET_CLIENT_TO_SERVER_DELAY_ESTIMATION:
        return f"Average client-to-server delay: {average_ms:g} ms"
    if code == RequestCode.MEASURE_RTT:
        return f"Average round-trip time (RTT): {average_ms:g} ms"
    raise ValueError(f"{code!r} is not an aggregate request")


def calc_avg_difference(samples: Sequence[int]) -> float:
    """
    Mean difference between consecutive tick samples.

    Differences are taken modulo 2**32, so a counter wrap between two
    samples still yields the elapsed ticks. Fewer than two samples give 0.
    """
    if len(samples) < 2:
        return 0.0
    total = sum(
        (current - previous) & BOUNDED_INT_MAX
        for previous, current in zip(samples, samples[1:])
    )
    return total / (len(samples) - 1)


def calc_average(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)
