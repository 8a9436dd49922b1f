"""Functional tests for the question registry."""

from __future__ import annotations

import pytest

from talent_questionnaire.logic.errors import ConflictError, NotFoundError, ValidationError
from talent_questionnaire.logic.events import QUESTION_DEACTIVATED, get_buffered_events
from talent_questionnaire.models.question import QuestionCreate, QuestionUpdate
from talent_questionnaire.models import question_kind
from talent_questionnaire.models.question_kind import ValueShape, is_known_kind, register_question_kind


def _text_question(category_id: int, slug: str, question: str = "Prompt", sort_order: int = 0) -> dict:
    return {
        "category_id": category_id,
        "question": question,
        "slug": slug,
        "question_type": "text",
        "sort_order": sort_order,
    }


@pytest.fixture
def two_categories(services):
    a = services.categories.create_category({"name": "Acting", "slug": "acting"})
    b = services.categories.create_category({"name": "Music", "slug": "music"})
    return a, b


def test_options_come_back_parsed_and_ordered(acting):
    years = acting["years"]
    assert [o.value for o in years.options] == ["0-1", "2-5", "6-10", "11-15"]
    assert years.options[0].label == "0-1 years"
    assert years.is_complete is True


def test_slug_unique_within_category_but_not_across(services, two_categories):
    a, b = two_categories
    services.questions.create_question(_text_question(a.id, "agent"))
    with pytest.raises(ConflictError):
        services.questions.create_question(_text_question(a.id, "agent"))
    other = services.questions.create_question(_text_question(b.id, "agent"))
    assert other.category_id == b.id


def test_create_requires_existing_category(services):
    with pytest.raises(NotFoundError):
        services.questions.create_question(_text_question(999, "agent"))


def test_create_allows_inactive_category_for_prestaging(services, two_categories):
    a, _ = two_categories
    services.categories.deactivate_category(a.id)
    q = services.questions.create_question(_text_question(a.id, "agent"))
    assert q.category_id == a.id
    assert services.questions.list_questions_by_category(a.id) == []


def test_unknown_question_type_is_rejected(services, two_categories):
    a, _ = two_categories
    payload = _text_question(a.id, "height")
    payload["question_type"] = "slider"
    with pytest.raises(ValidationError):
        services.questions.create_question(payload)


def test_registered_kind_becomes_usable(services, two_categories, mocker):
    a, _ = two_categories
    mocker.patch.dict(question_kind._KIND_SHAPES)
    register_question_kind("rating", ValueShape.SCALE)
    assert is_known_kind("rating")
    payload = _text_question(a.id, "confidence")
    payload["question_type"] = "rating"
    q = services.questions.create_question(payload)
    assert q.question_type == "rating"


def test_select_without_options_is_created_but_incomplete(services, two_categories):
    a, _ = two_categories
    q = services.questions.create_question(
        QuestionCreate(categoryId=a.id, question="Pick one", slug="pick", questionType="select")
    )
    assert q.options == []
    assert q.is_complete is False
    assert q.model_dump(by_alias=True)["isComplete"] is False


def test_duplicate_option_values_are_rejected(services, two_categories):
    a, _ = two_categories
    with pytest.raises(ValidationError):
        services.questions.create_question(
            {
                **_text_question(a.id, "pick"),
                "question_type": "select",
                "options": [{"value": "x", "label": "X"}, {"value": "x", "label": "Also X"}],
            }
        )


def test_category_id_is_immutable(services, acting):
    music = services.categories.create_category({"name": "Music", "slug": "music"})
    with pytest.raises(ValidationError):
        services.questions.update_question(acting["years"].id, {"category_id": music.id})


def test_update_slug_recheck_and_not_found(services, acting):
    with pytest.raises(ConflictError):
        services.questions.update_question(acting["specialty"].id, QuestionUpdate(slug="years_experience"))
    with pytest.raises(NotFoundError):
        services.questions.update_question(999, QuestionUpdate(question="Ghost"))
    renamed = services.questions.update_question(acting["specialty"].id, QuestionUpdate(slug="specialties"))
    assert renamed.slug == "specialties"
    assert renamed.question_type == "multiselect"


def test_soft_delete_visibility(services, acting):
    cat = acting["category"]
    years = acting["years"]
    services.questions.deactivate_question(years.id)
    listed = services.questions.list_questions_by_category(cat.id)
    assert years.id not in [q.id for q in listed]
    fetched = services.questions.get_question_by_id(years.id)
    assert fetched is not None and fetched.is_active is False
    assert {"type": QUESTION_DEACTIVATED, "payload": {"question_id": years.id}} in get_buffered_events()


def test_questions_of_deactivated_category_are_not_listed(services, acting):
    cat = acting["category"]
    services.categories.deactivate_category(cat.id)
    assert services.questions.list_questions_by_category(cat.id) == []
    assert services.questions.get_question_by_id(acting["years"].id) is not None


def test_listing_orders_by_sort_order_then_question_text(services, two_categories):
    a, _ = two_categories
    services.questions.create_question(_text_question(a.id, "q_c", "Charlie", sort_order=2))
    services.questions.create_question(_text_question(a.id, "q_b", "Bravo", sort_order=1))
    services.questions.create_question(_text_question(a.id, "q_a", "Alpha", sort_order=2))
    listed = services.questions.list_questions_by_category(a.id)
    assert [q.question for q in listed] == ["Bravo", "Alpha", "Charlie"]


def test_listing_empty_category_is_empty_not_error(services, two_categories):
    a, _ = two_categories
    assert services.questions.list_questions_by_category(a.id) == []
    assert services.questions.list_questions_by_category(4040) == []


def test_reorder_questions_is_scoped_to_category(services, acting):
    music = services.categories.create_category({"name": "Music", "slug": "music"})
    other = services.questions.create_question(_text_question(music.id, "instrument"))
    cat = acting["category"]
    with pytest.raises(ValidationError):
        services.questions.reorder_questions(cat.id, [other.id])
    result = services.questions.reorder_questions(cat.id, [acting["specialty"].id])
    assert [(q.slug, q.sort_order) for q in result] == [("primary_specialty", 1), ("years_experience", 2)]


def test_get_question_by_slug(services, acting):
    cat = acting["category"]
    found = services.questions.get_question_by_slug(cat.id, "years_experience")
    assert found is not None and found.id == acting["years"].id
    assert services.questions.get_question_by_slug(cat.id, "nope") is None
