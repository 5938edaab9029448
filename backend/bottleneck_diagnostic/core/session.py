import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Sequence, Tuple, Union

from .models import AnswerSet, Category, Question
from .questions import QUESTIONS
from .scoring import calculate_result, parse_category
from ..config import settings

logger = logging.getLogger(__name__)

# Keys shared with the browser client's session storage
COMPLETED_KEY = "leadMagnetCompleted"
TITLE_KEY = "leadMagnetTitle"
RESULT_KEY = "leadMagnetResult"

class KeyValueStore(Protocol):
    """Ephemeral client-side storage holding the completion flag and result"""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

class InMemoryStore:
    """Dict backed store, lives as long as the process"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

class JsonFileStore:
    """Store persisted to a small JSON file so a completed result survives restarts"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

class DiagnosticSession:
    """
    Quiz progress for one visitor

    Answers are appended one per question in table order. Completing the last
    question scores the answer set and records the result in the store so a
    reload can resume without answering again.
    """

    def __init__(self, store: Optional[KeyValueStore] = None,
                 questions: Sequence[Question] = QUESTIONS):
        self.store = store if store is not None else InMemoryStore()
        self.questions: Tuple[Question, ...] = tuple(questions)
        self.is_started = False
        self.is_completed = False
        self.current_question_index = 0
        self.answers: AnswerSet = {}
        self.result: Optional[Category] = None

        self._resume()

    def _resume(self):
        if self.store.get(COMPLETED_KEY) != "true":
            return
        result = parse_category(self.store.get(RESULT_KEY))
        if result is None:
            return
        self.is_started = True
        self.is_completed = True
        self.result = result
        logger.info(f"Resumed completed diagnostic: {result.value}")

    @property
    def current_question(self) -> Optional[Question]:
        if self.is_completed or self.current_question_index >= len(self.questions):
            return None
        return self.questions[self.current_question_index]

    def start(self):
        self.is_started = True

    def answer(self, choice: Union[Category, str]) -> Optional[Question]:
        """
        Record the answer to the current question

        Args:
            choice: Category, category value, or option id of the current question

        Returns:
            The next question, or None once the diagnostic is complete
        """
        if not self.is_started:
            raise ValueError("Diagnostic has not been started")
        question = self.current_question
        if question is None:
            raise ValueError("Diagnostic is already complete")

        option = question.get_option(choice) if isinstance(choice, str) else None
        category = option.category if option else parse_category(choice)
        if category is None:
            raise ValueError(f"Invalid answer for question {question.id}: {choice!r}")

        self.answers[question.id] = category

        if self.current_question_index < len(self.questions) - 1:
            self.current_question_index += 1
            return self.current_question

        self._complete()
        return None

    def _complete(self):
        self.result = calculate_result(self.answers)
        self.is_completed = True

        self.store.set(COMPLETED_KEY, "true")
        self.store.set(TITLE_KEY, settings.DIAGNOSTIC_TITLE)
        self.store.set(RESULT_KEY, self.result.value)

        logger.info(f"Diagnostic complete after {len(self.answers)} answers: {self.result.value}")

    def progress(self) -> Tuple[int, int, int]:
        """Question number, total questions and percentage done"""
        total = len(self.questions)
        if self.is_completed:
            return total, total, 100
        index = self.current_question_index
        percent = round(index / total * 100) if total else 100
        return index + 1, total, percent

    def reset(self):
        for key in (COMPLETED_KEY, TITLE_KEY, RESULT_KEY):
            self.store.delete(key)
        self.is_started = False
        self.is_completed = False
        self.current_question_index = 0
        self.answers = {}
        self.result = None
