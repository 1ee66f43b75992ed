"""Date and time formatting utilities."""


def format_age(age_days: int) -> str:
    """
    Format age in days.

    Args:
        age_days: Number of days

    Returns:
        Formatted age string
    """
    if age_days == 1:
        return "1 day ago"
    return f"{age_days} days ago"


def format_last_commit(relative: str, age_days: int) -> str:
    """Relative commit date followed by the age in days, e.g. '3 weeks ago (21 days ago)'."""
    return f"{relative} ({format_age(age_days)})"
