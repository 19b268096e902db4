"""
Small helpers shared by the workflow and the outbound services.
"""

import random
import re
import string
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

# Domains commonly used for testing or as placeholders
FAKE_EMAIL_DOMAINS = {
    "example.com", "example.org", "example.net",
    "test.com", "test.org", "test.net",
    "fake.com", "fake.org",
    "dummy.com", "dummy.org",
    "sample.com", "sample.org",
    "placeholder.com", "placeholder.org",
    "mailinator.com", "tempmail.com",
    "localhost", "localhost.com",
    "abc.com", "xyz.com", "aaa.com",
    "email.com", "mail.com",
}

FAKE_EMAIL_LOCAL_PARTS = {
    "test", "demo", "fake", "dummy", "sample", "placeholder",
    "user", "admin", "info", "contact", "noreply", "no-reply",
    "asdf", "qwerty", "abcd", "xyz", "abc", "aaa", "bbb",
}

DEFAULT_HEARING_TIME = (9, 0)

_TIME_24H = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_12H = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(AM|PM)$", re.IGNORECASE)
_DAY_FIRST = re.compile(r"(\d{1,2})[/\-](\d{1,2})[/\-](\d{4})")
_YEAR_FIRST = re.compile(r"(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})")


def generate_case_number(year: Optional[int] = None) -> str:
    """Generate a case number in the form CASE-YYYY-XXXXX."""
    year = year or datetime.now().year
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=5))
    return f"CASE-{year}-{suffix}"


def is_real_email(email: Optional[str]) -> bool:
    """
    Check whether an address looks deliverable rather than a placeholder.

    Rejects well-known test domains, generic local parts such as
    ``test`` or ``admin`` and one-to-three letter local parts.
    """
    if not email or not isinstance(email, str):
        return False

    email = email.strip().lower()
    if "@" not in email or "." not in email:
        return False

    parts = email.split("@")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return False

    local_part, domain = parts
    if domain in FAKE_EMAIL_DOMAINS:
        return False
    if local_part in FAKE_EMAIL_LOCAL_PARTS:
        return False
    if re.match(r"^[a-z]{1,3}@", email):
        return False

    return True


def _add_month(value: date) -> date:
    month = value.month % 12 + 1
    year = value.year + (1 if value.month == 12 else 0)
    # Clamp to the last valid day of the target month
    for day in (value.day, 30, 29, 28):
        try:
            return value.replace(year=year, month=month, day=day)
        except ValueError:
            continue
    return value


def parse_date(value: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """
    Parse a hearing date from extractor output.

    Accepts ISO dates (optionally with a time part), DD/MM/YYYY,
    YYYY/MM/DD (dash separators too) and the relative phrases
    "today", "tomorrow", "next week" and "next month".

    Returns:
        date or None when nothing could be parsed
    """
    if not value:
        return None

    text = str(value).strip()
    today = today or date.today()

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    lowered = text.lower()
    if "today" in lowered:
        return today
    if "tomorrow" in lowered:
        return today + timedelta(days=1)
    if "next week" in lowered:
        return today + timedelta(days=7)
    if "next month" in lowered:
        return _add_month(today)

    match = _YEAR_FIRST.search(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    match = _DAY_FIRST.search(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    return None


def parse_hearing_time(value: Optional[str]) -> Tuple[int, int]:
    """
    Parse "HH:MM" or "H[:MM] AM/PM" into (hour, minute).

    Falls back to 09:00 when the value is absent or unrecognised.
    """
    if not value:
        return DEFAULT_HEARING_TIME

    text = str(value).strip()

    match = _TIME_24H.match(text)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour < 24 and minute < 60:
            return hour, minute
        return DEFAULT_HEARING_TIME

    match = _TIME_12H.match(text)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0
        is_pm = match.group(3).upper() == "PM"
        if is_pm and hour != 12:
            hour += 12
        if not is_pm and hour == 12:
            hour = 0
        if hour < 24 and minute < 60:
            return hour, minute

    return DEFAULT_HEARING_TIME


def format_date(value: Optional[str]) -> str:
    """Format a date for email bodies, e.g. '15 January 2025'."""
    parsed = parse_date(value) if isinstance(value, str) else value
    if not parsed:
        return value or ""
    return f"{parsed.day} {parsed.strftime('%B %Y')}"


def truncate_email(email: Optional[str]) -> Optional[str]:
    """Shorten an address for log lines."""
    if not email:
        return email
    return f"{email[:5]}..."
