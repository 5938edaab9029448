from typing import Dict, Mapping, Union, Optional
import logging

from .models import Category, CATEGORY_ORDER

logger = logging.getLogger(__name__)

RESULT_DESCRIPTIONS: Dict[Category, str] = {
    Category.PROCESS: (
        "Your department likely suffers from inefficient workflows or friction at key "
        "hand-off points. The talent is there, but the system is slowing them down."
    ),
    Category.ROLE: (
        "Your team faces ambiguity in ownership. When 'everyone' is responsible, no one is. "
        "This leads to decision fatigue and bottlenecks at leadership levels."
    ),
    Category.VISIBILITY: (
        "You are operating with blind spots. Without real-time insight into performance "
        "metrics, you are reacting to fires rather than preventing them."
    ),
}

def tally_votes(answers: Mapping[int, Union[Category, str]]) -> Dict[Category, int]:
    """
    Count answers per category

    Args:
        answers: Question id -> chosen category (member or display value)

    Returns:
        Vote count for every category, zero when unanswered

    Raises:
        ValueError: if an answer is not a known category
    """
    counts = {category: 0 for category in CATEGORY_ORDER}
    for value in answers.values():
        counts[Category(value)] += 1
    return counts

def calculate_result(answers: Mapping[int, Union[Category, str]]) -> Category:
    """
    Pick the category with the most votes

    Ties go to the category declared first (Process, then Role, then
    Visibility) no matter in which order the answers were given. An empty
    answer set yields Process.
    """
    counts = tally_votes(answers)
    # max() keeps the first maximal item, so iteration order is the tie-break
    result = max(CATEGORY_ORDER, key=lambda category: counts[category])
    logger.debug(f"Scored {len(answers)} answers: {counts} -> {result.value}")
    return result

def parse_category(value: Union[Category, str, None]) -> Optional[Category]:
    """Resolve a category from its member, value or name; None if unknown"""
    if isinstance(value, Category):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Category(value)
    except ValueError:
        return Category.__members__.get(value.strip().upper())

def describe_result(category: Union[Category, str, None]) -> str:
    """Explanatory paragraph shown with a result; empty for unknown input"""
    try:
        return RESULT_DESCRIPTIONS.get(Category(category), "")
    except ValueError:
        return ""
