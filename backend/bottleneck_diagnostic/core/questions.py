import logging
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Category, Option, Question, CATEGORY_ORDER

logger = logging.getLogger(__name__)

def _question(question_id: int, text: str, options: Sequence[Tuple[str, Category]]) -> Question:
    return Question(
        id=question_id,
        text=text,
        options=[
            Option(id=f"{question_id}{suffix}", text=option_text, category=category)
            for suffix, (option_text, category) in zip("abc", options)
        ],
    )

def validate_question_table(questions: Sequence[Question]) -> Tuple[Question, ...]:
    """
    Check the static question table before it is used

    Every question must have a unique id and exactly one option per category.
    Option ids must be unique across the table.

    Returns:
        The questions as an immutable tuple

    Raises:
        ValueError: listing every problem found
    """
    errors: List[str] = []
    seen_questions = set()
    seen_options = set()

    if not questions:
        errors.append("Question table is empty")

    for question in questions:
        if question.id in seen_questions:
            errors.append(f"Duplicate question id: {question.id}")
        seen_questions.add(question.id)

        categories = [option.category for option in question.options]
        if len(question.options) != len(CATEGORY_ORDER) or set(categories) != set(CATEGORY_ORDER):
            covered = sorted(c.name for c in set(categories))
            errors.append(
                f"Question {question.id} must have one option per category, got {covered}"
            )

        for option in question.options:
            if option.id in seen_options:
                errors.append(f"Duplicate option id: {option.id}")
            seen_options.add(option.id)

    if errors:
        raise ValueError("Invalid question table: " + "; ".join(errors))

    return tuple(questions)

QUESTIONS: Tuple[Question, ...] = validate_question_table([
    _question(1, "Where do tasks most often slow down or pile up in your department?", [
        ("During hand-offs between different teams or workflow stages.", Category.PROCESS),
        ("When waiting for specific individuals to make decisions or approve items.", Category.ROLE),
        ("We often don't realize things are stuck until a deadline is missed.", Category.VISIBILITY),
    ]),
    _question(2, "How clear are roles and responsibilities across your team?", [
        ("Roles are defined, but the workflow processes themselves are clunky.", Category.PROCESS),
        ("There is frequent overlap or confusion about who owns what.", Category.ROLE),
        ("Everyone knows their job, but we lack data on actual output quality.", Category.VISIBILITY),
    ]),
    _question(3, "Which of these issues shows up most frequently?", [
        ("Recurring errors or inefficiencies in execution steps.", Category.PROCESS),
        ("Disputes over tasks not being in someone's job description.", Category.ROLE),
        ("Surprise operational failures that we didn't see coming.", Category.VISIBILITY),
    ]),
    _question(4, "When performance drops, how confident are you that you know why?", [
        ("I know where the process breaks, but fixing the workflow is difficult.", Category.PROCESS),
        ("Unsure, because it often depends on which individual is handling the task.", Category.ROLE),
        ("I usually only find out about the drop after the fact, so root cause is hard to trace.", Category.VISIBILITY),
    ]),
])

QUESTIONS_BY_ID: Dict[int, Question] = {question.id: question for question in QUESTIONS}

def get_question(question_id: int) -> Optional[Question]:
    return QUESTIONS_BY_ID.get(question_id)
