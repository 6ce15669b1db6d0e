"""Typed wire serialization for event payloads."""

from __future__ import annotations

from typing import ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field


@runtime_checkable
class WireSerializable(Protocol):
    """Record that knows its own JSON wire encoding."""

    def to_wire_format(self) -> str:
        """Return the JSON payload sent to the collector."""


class WireModel(BaseModel):
    """Pydantic base for event records sent to the collector."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    def to_wire_format(self) -> str:
        return self.model_dump_json(by_alias=True)


class ExperienceData(WireModel):
    """Build and placement details attached to every standard event."""

    version_number: str = Field(alias="versionNumber")
    experience_label: str = Field(alias="experienceLabel")
    location: str


class StandardEvent(WireModel):
    """Standard event published to a fixed collection."""

    collection_name: ClassVar[str]

    experience_data: ExperienceData = Field(alias="experienceData")


class SessionEvent(StandardEvent):
    collection_name: ClassVar[str] = "Session"

    duration: float
    register_status: str = Field(alias="registerStatus")
    abandoned: bool


class QuizEvent(StandardEvent):
    collection_name: ClassVar[str] = "QuizEvent"

    quiz_id: str = Field(alias="quizId")
    quiz_result: str = Field(alias="quizResult")


class QuestionEvent(StandardEvent):
    collection_name: ClassVar[str] = "QuestionEvent"

    quiz_id: str = Field(alias="quizId")
    question_id: str = Field(alias="questionId")
    question_answer: str = Field(alias="questionAnswer")
    question_answer_value: float = Field(alias="questionAnswerValue")


class ActionEvent(StandardEvent):
    collection_name: ClassVar[str] = "ActionEvent"

    action_id: str = Field(alias="actionId")


class PageEvent(StandardEvent):
    collection_name: ClassVar[str] = "Pages"

    page_name: str = Field(alias="pageName")
    duration: float


__all__ = [
    "ActionEvent",
    "ExperienceData",
    "PageEvent",
    "QuestionEvent",
    "QuizEvent",
    "SessionEvent",
    "StandardEvent",
    "WireModel",
    "WireSerializable",
]
