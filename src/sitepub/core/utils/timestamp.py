"""Release timestamps for commit messages"""

from datetime import datetime
from typing import Optional


# Same layout as date(1): 'Sat Oct 17 14:03:22 UTC 2026'
DATE_FORMAT = "%a %b %d %H:%M:%S %Z %Y"


def release_timestamp(now: Optional[datetime] = None) -> str:
    """Local time with zone name, formatted like the date command."""
    now = (now or datetime.now()).astimezone()
    return now.strftime(DATE_FORMAT)


def release_message(template: str, now: Optional[datetime] = None) -> str:
    """Render a commit message template, substituting {timestamp}."""
    return template.format(timestamp=release_timestamp(now))
