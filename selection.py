"""
Pick one item out of an ordered list by its 1-based position.

select_from_list holds the bounds rules; prompt_selection is the
interactive wrapper the text menu uses.
"""

import logging
from typing import Callable, Optional, Sequence, TypeVar

from exceptions import EmptySelectionError, InvalidSelectionError, OutOfRangeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def select_from_list(items: Sequence[T], position: int) -> T:
    """
    Return the item at a 1-based position without removing it.

    Args:
        items: Ordered, non-empty sequence
        position: 1-based index chosen by the user

    Returns:
        The selected item

    Raises:
        EmptySelectionError: If items is empty
        OutOfRangeError: If position is outside [1, len(items)]
    """
    if not items:
        raise EmptySelectionError("Cannot select from an empty list.")
    if position < 1 or position > len(items):
        raise OutOfRangeError(
            "Invalid selection index.",
            details={"position": position, "size": len(items)},
        )
    return items[position - 1]


def prompt_selection(
    items: Sequence[T],
    *,
    input_func: Optional[Callable[[str], str]] = None,
    output_func: Optional[Callable[[str], None]] = None,
    label: Callable[[T], str] = str
) -> T:
    """
    Print a numbered list, read a position and return the chosen item.

    Args:
        items: Ordered, non-empty sequence
        input_func: Optional callable to replace `input` (useful for testing)
        output_func: Optional callable to replace `print`
        label: Renders each item in the numbered list

    Raises:
        EmptySelectionError: If items is empty
        InvalidSelectionError: If the typed text is not a whole number
        OutOfRangeError: If the number is outside the list
    """
    input_func = input_func or input
    output_func = output_func or print

    if not items:
        raise EmptySelectionError("Cannot select from an empty list.")

    for number, item in enumerate(items, start=1):
        output_func(f"{number}. {label(item)}")

    raw = input_func("Select by number: ").strip()
    try:
        position = int(raw)
    except ValueError as exc:
        raise InvalidSelectionError(
            "Selection must be a number.", details={"value": raw}, original_error=exc
        ) from exc

    logger.debug("Selected position %d of %d", position, len(items))
    return select_from_list(items, position)
