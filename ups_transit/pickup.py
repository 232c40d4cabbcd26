from datetime import date, datetime, timedelta

SATURDAY = 5
SUNDAY = 6
FRIDAY = 4


def calculate_pickup_date(now: datetime, cutoff_hour: int) -> date:
    """
    Returns the date the shipment is assumed to be handed to UPS.

    Weekends, and Fridays after the cutoff hour, move the pickup to the same
    weekday of the following week. Any other day after the cutoff hour moves
    it to tomorrow. The comparison is strict, so a request made during the
    cutoff hour itself still ships today.
    """
    weekday = now.weekday()
    after_cutoff = now.hour > cutoff_hour

    if weekday in (SATURDAY, SUNDAY) or (weekday == FRIDAY and after_cutoff):
        return now.date() + timedelta(days=7)
    if after_cutoff:
        return now.date() + timedelta(days=1)
    return now.date()
