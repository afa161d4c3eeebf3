"""Server-side mapping from request codes to time computations."""

from typing import Callable, Dict, Optional

from protocol.commands import RequestCode
from protocol.constants import LAP_STARTED_TEXT
from protocol.messages import (
    BoundedIntPayload,
    PongPayload,
    Request,
    ResponsePayload,
    TextPayload,
)
from server.lap_timer import EndpointIdentity, LapStarted, LapTimerTable, format_lap
from timekeeping import queries
from timekeeping.clock import Clock
from timekeeping.zones import DEFAULT_CITY
from utils.exceptions import MissingParameterError
from utils.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[[Request, EndpointIdentity], ResponsePayload]


def require_param(request: Request, index: int = 0) -> str:
    """
    Get a request parameter by position.

    Raises:
        MissingParameterError: If the request carries fewer parameters
    """
    if index >= len(request.params):
        raise MissingParameterError(
            f"{request.describe()} requires parameter #{index + 1}"
        )
    return request.params[index]


class Dispatcher:
    """Computes the response payload for each decoded request."""

    def __init__(self, clock: Clock, lap_timer: LapTimerTable):
        """
        Args:
            clock: Source of wall-clock, monotonic and tick readings
            lap_timer: Lap timer table shared by all requests
        """
        self._clock = clock
        self._lap_timer = lap_timer
        self._handlers: Dict[RequestCode, Handler] = {
            RequestCode.GET_TIME: self._get_time,
            RequestCode.GET_TIME_WITHOUT_DATE: self._get_time_without_date,
            RequestCode.GET_TIME_SINCE_EPOCH: self._get_time_since_epoch,
            RequestCode.GET_CLIENT_TO_SERVER_DELAY_ESTIMATION: self._get_delay_estimation,
            RequestCode.MEASURE_RTT: self._measure_rtt,
            RequestCode.GET_TIME_WITHOUT_DATE_OR_SECONDS: self._get_time_without_date_or_seconds,
            RequestCode.GET_YEAR: self._get_year,
            RequestCode.GET_MONTH_AND_DAY: self._get_month_and_day,
            RequestCode.GET_SECONDS_SINCE_BEGINNING_OF_MONTH: self._get_seconds_since_month_start,
            RequestCode.GET_WEEK_OF_YEAR: self._get_week_of_year,
            RequestCode.GET_DAYLIGHT_SAVINGS: self._get_daylight_savings,
            RequestCode.GET_TIME_WITHOUT_DATE_IN_CITY: self._get_time_in_city,
            RequestCode.MEASURE_TIME_LAP: self._measure_time_lap,
        }

    def handles(self, code: int) -> bool:
        """Whether requests with this code get a response."""
        return code in self._handlers

    def handle(self, request: Request, endpoint: EndpointIdentity) -> Optional[ResponsePayload]:
        """
        Compute the response to a request.

        Args:
            request: Decoded request
            endpoint: Client that sent the request

        Returns:
            Response payload, or None when the code has no handler
            (ERROR, DEFAULT and unknown codes are dropped silently)
        """
        handler = self._handlers.get(request.code)
        if handler is None:
            logger.debug(f"No handler for {request.describe()} from {endpoint}")
            return None
        return handler(request, endpoint)

    def _get_time(self, request, endpoint):
        return TextPayload(queries.get_time(self._clock.local_now()))

    def _get_time_without_date(self, request, endpoint):
        return TextPayload(queries.get_time_without_date(self._clock.local_now()))

    def _get_time_since_epoch(self, request, endpoint):
        return BoundedIntPayload(queries.get_time_since_epoch(self._clock.utc_now()))

    def _get_delay_estimation(self, request, endpoint):
        return BoundedIntPayload(
            queries.get_client_to_server_delay_estimation(self._clock.ticks())
        )

    def _measure_rtt(self, request, endpoint):
        return PongPayload()

    def _get_time_without_date_or_seconds(self, request, endpoint):
        return TextPayload(queries.get_time_without_date_or_seconds(self._clock.local_now()))

    def _get_year(self, request, endpoint):
        return TextPayload(queries.get_year(self._clock.local_now()))

    def _get_month_and_day(self, request, endpoint):
        return TextPayload(queries.get_month_and_day(self._clock.local_now()))

    def _get_seconds_since_month_start(self, request, endpoint):
        return BoundedIntPayload(
            queries.get_seconds_since_beginning_of_month(self._clock.local_now())
        )

    def _get_week_of_year(self, request, endpoint):
        return BoundedIntPayload(queries.get_week_of_year(self._clock.local_now()))

    def _get_daylight_savings(self, request, endpoint):
        return TextPayload(queries.get_daylight_savings(self._clock.local_now()))

    def _get_time_in_city(self, request, endpoint):
        try:
            city = require_param(request)
        except MissingParameterError as e:
            logger.warning(f"{e}, falling back to {DEFAULT_CITY}")
            city = DEFAULT_CITY
        return TextPayload(
            queries.get_time_without_date_in_city(city, self._clock.utc_now())
        )

    def _measure_time_lap(self, request, endpoint):
        result = self._lap_timer.touch(endpoint, self._clock.monotonic())
        if isinstance(result, LapStarted):
            return TextPayload(LAP_STARTED_TEXT)
        return TextPayload(format_lap(result.seconds))
