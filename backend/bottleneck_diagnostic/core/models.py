from typing import Dict, List, Optional, Literal
from enum import Enum
from pydantic import BaseModel, Field

class Category(str, Enum):
    """Bottleneck classifications, in tie-break order"""
    PROCESS = "Process Bottleneck"
    ROLE = "Role & Ownership Bottleneck"
    VISIBILITY = "Performance Visibility Bottleneck"

# Declaration order decides ties between equally voted categories
CATEGORY_ORDER: List[Category] = list(Category)

class Option(BaseModel):
    """One selectable answer of a question"""
    id: str
    text: str
    category: Category

    class Config:
        frozen = True

class Question(BaseModel):
    """Diagnostic question with one option per category"""
    id: int
    text: str
    options: List[Option]

    class Config:
        frozen = True

    def get_option(self, option_id: str) -> Optional[Option]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    def option_for(self, category: Category) -> Option:
        """Return the option mapped to a category"""
        for option in self.options:
            if option.category == category:
                return option
        raise ValueError(f"Question {self.id} has no option for {category.value}")

# AnswerSet: question id -> chosen category
AnswerSet = Dict[int, Category]

class ConversationTurn(BaseModel):
    """Single chat message tagged with its originating role"""
    role: Literal["user", "model"]
    text: str

# API Request/Response Models

class AssistantRequest(BaseModel):
    """Chat turn forwarded to the assistant"""
    message: Optional[str] = None
    history: List[ConversationTurn] = Field(default_factory=list)
    result: str = Field("", description="Diagnostic result the user received")

class AssistantReply(BaseModel):
    text: str

class ErrorResponse(BaseModel):
    error: str
    hint: Optional[str] = None

class ScoreRequest(BaseModel):
    """Answers collected by the presentation layer"""
    answers: Dict[int, Category] = Field(default_factory=dict)

class ResultResponse(BaseModel):
    result: Category
    description: str
