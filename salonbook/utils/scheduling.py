from datetime import datetime, timedelta, time


def parse_time(value):
    """Parse 'HH:MM' (or a time object) into a time"""
    if isinstance(value, time):
        return value
    return datetime.strptime(value.strip(), '%H:%M').time()


def format_time(value):
    return value.strftime('%H:%M')


def overlaps(start, end, other_start, other_end):
    return start < other_end and end > other_start


def generate_time_slots(day, start_time, end_time, duration_minutes, interval_minutes=0,
                        busy=(), not_before=None):
    """
    Generate the free start times of a working day

    Parameters:
    - day: the date being booked
    - start_time / end_time: working hours of the professional
    - duration_minutes: length of the service being booked
    - interval_minutes: step between candidates (0 = step by the duration)
    - busy: iterable of (start, end) datetimes that are already taken
    - not_before: datetime before which no slot may start (e.g. now)

    Returns a list of 'HH:MM' strings in chronological order.
    """
    if duration_minutes <= 0:
        return []

    step = timedelta(minutes=interval_minutes or duration_minutes)
    duration = timedelta(minutes=duration_minutes)

    current = datetime.combine(day, start_time)
    day_end = datetime.combine(day, end_time)
    busy = list(busy)

    slots = []
    while current + duration <= day_end:
        slot_end = current + duration
        is_available = not_before is None or current >= not_before

        if is_available:
            for busy_start, busy_end in busy:
                if overlaps(current, slot_end, busy_start, busy_end):
                    is_available = False
                    break

        if is_available:
            slots.append(format_time(current))

        # Move to next slot
        current += step

    return slots


def parse_date(value):
    """Parse 'YYYY-MM-DD' into a date"""
    return datetime.strptime(value.strip(), '%Y-%m-%d').date()
