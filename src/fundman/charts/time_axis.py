"""
Fixed intraday time axis.

The trading session runs 09:30-11:30 and 13:00-15:00. Samples are plotted
positionally against this axis, one label per minute; the labels do not
depend on the sample timestamps.
"""

SESSION_MINUTES = 240


def build_time_axis(count: int = SESSION_MINUTES) -> list[str]:
    """
    Build ``"HH:MM"`` labels for the trading session.

    Starts at 09:30 and advances one minute per label, jumping from the
    12 o'clock hour straight to 13:00.

    Args:
        count: Number of labels wanted (capped at 240)

    Returns:
        List of labels
    """
    hour, minute = 9, 30
    labels = []
    for _ in range(min(count, SESSION_MINUTES)):
        labels.append(f"{hour:02d}:{minute:02d}")
        minute += 1
        if minute >= 60:
            hour += 1
            minute = 0
        # lunch break
        if hour == 12:
            hour = 13
    return labels
