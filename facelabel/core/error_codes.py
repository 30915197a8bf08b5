# facelabel/core/error_codes.py
"""
Structured error codes for layout and run failures.
Use these keys in results and batch rows; map to user-facing messages for display.
"""

# Known error keys
TEXT_METRICS_UNAVAILABLE = "text_metrics_unavailable"
NO_NAMED_PEOPLE = "no_named_people"
LOOP_LIMIT_REACHED = "loop_limit_reached"
SEARCH_SPACE_EXHAUSTED = "search_space_exhausted"
INVALID_INPUT = "invalid_input"
RUN_FAILED = "run_failed"

# User-facing messages (short, actionable)
USER_MESSAGES: dict[str, str] = {
    TEXT_METRICS_UNAVAILABLE: "Could not measure label text. Check the font family and that Pillow can load it.",
    NO_NAMED_PEOPLE: "No named face regions in this photo; nothing to label.",
    LOOP_LIMIT_REACHED: "Experiment loop limit reached; using the least overlapping layout found.",
    SEARCH_SPACE_EXHAUSTED: "No clash-free layout exists for the enabled options; using the least overlapping layout found.",
    INVALID_INPUT: "Photo entry is malformed. Check width, height and region fields.",
    RUN_FAILED: "Run failed. Check inputs and configuration.",
}


def user_message(error_key: str | None, fallback: str = "Something went wrong.") -> str:
    """Return a user-facing message for the given error key."""
    if not error_key:
        return fallback
    return USER_MESSAGES.get(error_key, fallback)
