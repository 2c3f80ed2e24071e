"""Freshness checks for cached readings."""


def is_fresh(fetched_at: float, interval: float, now: float) -> bool:
    """Check if a reading fetched at ``fetched_at`` is still usable at ``now``.

    Exactly ``interval`` seconds old is stale.
    """
    return now - fetched_at < interval
