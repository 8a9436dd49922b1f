"""Wires the registries for one engine.

Each ``Services`` owns its own store objects; nothing here is a process-wide
singleton, so tests build one per in-memory database.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from talent_questionnaire.logic.profile_projector import ProfileProjector
from talent_questionnaire.logic.repository_categories import CategoryRegistry
from talent_questionnaire.logic.repository_questions import QuestionRegistry
from talent_questionnaire.logic.repository_responses import ResponseStore
from talent_questionnaire.logic.seeder import Seeder


@dataclass
class Services:
    engine: Engine
    categories: CategoryRegistry
    questions: QuestionRegistry
    responses: ResponseStore
    projector: ProfileProjector
    seeder: Seeder

    @classmethod
    def for_engine(cls, engine: Engine) -> "Services":
        categories = CategoryRegistry.for_engine(engine)
        questions = QuestionRegistry.for_engine(engine, categories)
        responses = ResponseStore.for_engine(engine, questions)
        return cls(
            engine=engine,
            categories=categories,
            questions=questions,
            responses=responses,
            projector=ProfileProjector(categories, questions, responses),
            seeder=Seeder(categories, questions),
        )


__all__ = ["Services"]
