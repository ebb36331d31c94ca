"""
Upstream feed URL construction
"""
from datetime import date, timedelta

FEED_DATE_FORMAT = "%d-%m-%Y"


def build_feed_urls(template: str, days: int = 3, today: date | None = None) -> list[str]:
    """
    Build one feed URL per day, starting today

    Args:
        template: URL containing a '{date}' placeholder
        days: Number of consecutive days to cover
        today: Reference date (defaults to the local server date)

    Returns:
        URLs in ascending day order with dates formatted as DD-MM-YYYY
    """
    start = today or date.today()
    return [
        template.replace("{date}", (start + timedelta(days=offset)).strftime(FEED_DATE_FORMAT))
        for offset in range(days)
    ]
