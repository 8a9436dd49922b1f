"""Seeds the starter questionnaire.

Safe to run repeatedly: categories and questions are matched by slug among
active rows and only the missing ones are created. Existing rows are left as
the admins edited them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from talent_questionnaire.logic.events import QUESTIONNAIRE_SEEDED, publish
from talent_questionnaire.logic.repository_categories import CategoryRegistry
from talent_questionnaire.logic.repository_questions import QuestionRegistry
from talent_questionnaire.logic.seed_data import STARTER_SET

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    categories_created: List[str] = field(default_factory=list)
    categories_skipped: List[str] = field(default_factory=list)
    questions_created: List[str] = field(default_factory=list)
    questions_skipped: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categoriesCreated": len(self.categories_created),
            "categoriesSkipped": len(self.categories_skipped),
            "questionsCreated": len(self.questions_created),
            "questionsSkipped": len(self.questions_skipped),
            "created": {"categories": self.categories_created, "questions": self.questions_created},
        }


class Seeder:
    def __init__(
        self,
        categories: CategoryRegistry,
        questions: QuestionRegistry,
        dataset: Optional[Sequence[Dict[str, Any]]] = None,
    ) -> None:
        self._categories = categories
        self._questions = questions
        self._dataset = dataset if dataset is not None else STARTER_SET

    def seed_all(self) -> SeedReport:
        """Create whatever part of the starter set is missing.

        Registry errors propagate; rows created before the failure stay.
        """
        report = SeedReport()
        for block in self._dataset:
            cat_data = block["category"]
            category = self._categories.get_category_by_slug(cat_data["slug"])
            if category is None:
                category = self._categories.create_category(dict(cat_data))
                report.categories_created.append(category.slug)
            else:
                report.categories_skipped.append(category.slug)

            for q_data in block["questions"]:
                key = f"{category.slug}.{q_data['slug']}"
                if self._questions.get_question_by_slug(category.id, q_data["slug"]) is not None:
                    report.questions_skipped.append(key)
                    continue
                self._questions.create_question({**q_data, "category_id": category.id})
                report.questions_created.append(key)

        logger.info(
            "questionnaire_seeded categories_created=%s questions_created=%s questions_skipped=%s",
            len(report.categories_created),
            len(report.questions_created),
            len(report.questions_skipped),
        )
        publish(QUESTIONNAIRE_SEEDED, report.to_dict())
        return report


__all__ = ["Seeder", "SeedReport"]
