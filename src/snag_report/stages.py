"""Release-stage gate."""

from collections.abc import Collection


def should_send(enabled_stages: Collection[str], current_stage: str) -> bool:
    """An empty allow-list means every stage reports."""
    return not enabled_stages or current_stage in enabled_stages
