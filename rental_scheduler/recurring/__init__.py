from rental_scheduler.recurring.pricing import (
    calculate_recurring_price,
    export_recurring_schedule,
    get_recurring_summary,
)
from rental_scheduler.recurring.series import (
    generate_recurring_dates,
    get_recurring_pattern_suggestions,
    validate_recurring_pattern,
)

__all__ = [
    "generate_recurring_dates",
    "validate_recurring_pattern",
    "get_recurring_pattern_suggestions",
    "calculate_recurring_price",
    "get_recurring_summary",
    "export_recurring_schedule",
]
