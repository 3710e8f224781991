"""ISO 8601 duration formatting for MPD attributes."""


def format_duration(total_seconds: int) -> str:
    """
    Format a whole number of seconds as an ISO 8601 duration.

    Zero-valued hour and minute components are omitted. The seconds component
    is omitted when zero unless it is the only component, so the result is
    never a bare "PT".

    Args:
        total_seconds: Duration in whole seconds

    Returns:
        Duration string such as "PT45S", "PT2M5S" or "PT1H"
    """
    if total_seconds <= 0:
        return "PT0S"

    hours, remainder = divmod(int(total_seconds), 3600)
    minutes, seconds = divmod(remainder, 60)

    duration = "PT"
    if hours > 0:
        duration += f"{hours}H"
    if minutes > 0:
        duration += f"{minutes}M"
    if seconds > 0 or (hours == 0 and minutes == 0):
        duration += f"{seconds}S"

    return duration
