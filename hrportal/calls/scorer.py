"""Daily call-center performance score."""

VISIT_WEIGHT = 40
INTERESTED_WEIGHT = 30
CALL_TIME_WEIGHT = 0.2
CALL_COUNT_WEIGHT = 0.1


def compute_score(
    visited_today: float,
    interested_students: float,
    total_call_time: float,
    total_calls: float,
) -> float:
    """Weighted sum of the four daily counters; inputs are not clamped."""
    return (
        visited_today * VISIT_WEIGHT
        + interested_students * INTERESTED_WEIGHT
        + total_call_time * CALL_TIME_WEIGHT
        + total_calls * CALL_COUNT_WEIGHT
    )
