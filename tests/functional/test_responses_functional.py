"""Functional tests for the response store."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import text as sql_text

from talent_questionnaire.logic.errors import AggregateError, NotFoundError, ValidationError
from talent_questionnaire.db.base import build_engine
from talent_questionnaire.db.migrations_runner import apply_migrations
from talent_questionnaire.logic.events import RESPONSE_DELETED, RESPONSE_SAVED, get_buffered_events, subscribe
from talent_questionnaire.logic.services import Services
from talent_questionnaire.models.response import ResponseSubmit


def _row_count(engine, user_id: str, question_id: int) -> int:
    with engine.connect() as conn:
        return int(
            conn.execute(
                sql_text(
                    "SELECT COUNT(*) FROM questionnaire_responses WHERE user_id = :u AND question_id = :q"
                ),
                {"u": user_id, "q": question_id},
            ).scalar_one()
        )


def _question(services, category_id: int, slug: str, question_type: str, options=None):
    return services.questions.create_question(
        {
            "category_id": category_id,
            "question": f"Prompt for {slug}",
            "slug": slug,
            "question_type": question_type,
            "options": options,
        }
    )


def test_upsert_keeps_one_row_with_latest_value(services, engine, acting):
    years = acting["years"]
    first = services.responses.save_response("u1", years.id, "6-10")
    second = services.responses.save_response("u1", years.id, "11-15")
    assert second.id == first.id
    assert second.response == "11-15"
    assert second.created_at == first.created_at
    assert second.updated_at >= first.updated_at
    assert _row_count(engine, "u1", years.id) == 1
    assert services.responses.get_response("u1", years.id).response == "11-15"


def test_users_do_not_share_responses(services, acting):
    years = acting["years"]
    services.responses.save_response("u1", years.id, "0-1")
    services.responses.save_response("u2", years.id, "2-5")
    assert services.responses.get_response("u1", years.id).response == "0-1"
    assert services.responses.get_response("u2", years.id).response == "2-5"


def test_save_publishes_event(services, acting):
    services.responses.save_response("u1", acting["years"].id, "0-1")
    events = get_buffered_events()
    assert events == [{"type": RESPONSE_SAVED, "payload": {"user_id": "u1", "question_id": acting["years"].id}}]


def test_value_round_trips_exactly(services, acting):
    chosen = ["voice_over", "film"]
    saved = services.responses.save_response("u1", acting["specialty"].id, chosen)
    assert saved.response == chosen
    assert services.responses.get_response("u1", acting["specialty"].id).response == chosen


@pytest.mark.parametrize(
    "value",
    ["film", ["film", 3], ["stunts"], None],
)
def test_multiselect_rejects_wrong_shape_or_unknown_option(services, acting, value):
    with pytest.raises(ValidationError):
        services.responses.save_response("u1", acting["specialty"].id, value)


@pytest.mark.parametrize("value", [["6-10"], 6, "99+"])
def test_select_rejects_wrong_shape_or_unknown_option(services, acting, value):
    with pytest.raises(ValidationError):
        services.responses.save_response("u1", acting["years"].id, value)


def test_typed_kinds_validate_their_values(services, acting):
    cat_id = acting["category"].id
    height = _question(services, cat_id, "height_cm", "number")
    union = _question(services, cat_id, "union_member", "boolean")
    confidence = _question(services, cat_id, "confidence", "scale")
    available = _question(services, cat_id, "available_from", "date")
    bio = _question(services, cat_id, "bio", "textarea")

    assert services.responses.save_response("u1", height.id, 182.5).response == 182.5
    assert services.responses.save_response("u1", union.id, True).response is True
    assert services.responses.save_response("u1", confidence.id, 7).response == 7
    assert services.responses.save_response("u1", available.id, "2026-11-01").response == "2026-11-01"
    assert services.responses.save_response("u1", bio.id, "Trained at RADA").response == "Trained at RADA"

    for question_id, bad in [
        (height.id, "182"),
        (union.id, "yes"),
        (confidence.id, 11),
        (confidence.id, 0),
        (available.id, "01/11/2026"),
        (bio.id, ["list"]),
    ]:
        with pytest.raises(ValidationError):
            services.responses.save_response("u1", question_id, bad)


def test_select_without_options_accepts_any_string(services, acting):
    q = _question(services, acting["category"].id, "pending", "select")
    assert services.responses.save_response("u1", q.id, "anything").response == "anything"


def test_unknown_and_inactive_questions_are_rejected(services, acting):
    with pytest.raises(NotFoundError):
        services.responses.save_response("u1", 9999, "x")
    services.questions.deactivate_question(acting["years"].id)
    with pytest.raises(ValidationError):
        services.responses.save_response("u1", acting["years"].id, "0-1")


def test_blank_user_id_is_rejected(services, acting):
    with pytest.raises(ValidationError):
        services.responses.save_response("  ", acting["years"].id, "0-1")


def test_list_responses_most_recent_first(services, acting):
    services.responses.save_response("u1", acting["years"].id, "0-1")
    services.responses.save_response("u1", acting["specialty"].id, ["film"])
    services.responses.save_response("u1", acting["years"].id, "2-5")
    listed = services.responses.list_responses("u1")
    assert [r.question_id for r in listed] == [acting["years"].id, acting["specialty"].id]


def test_list_by_category_follows_question_order(services, acting):
    services.responses.save_response("u1", acting["specialty"].id, ["film"])
    services.responses.save_response("u1", acting["years"].id, "0-1")
    other = services.categories.create_category({"name": "Music", "slug": "music"})
    vocal = _question(services, other.id, "vocal_range", "text")
    services.responses.save_response("u1", vocal.id, "tenor")

    listed = services.responses.list_responses_by_category("u1", acting["category"].id)
    assert [r.question_id for r in listed] == [acting["years"].id, acting["specialty"].id]


def test_list_by_category_without_questions_is_empty(services):
    empty = services.categories.create_category({"name": "Empty", "slug": "empty"})
    assert services.responses.list_responses_by_category("u1", empty.id) == []


def test_batch_saves_in_order(services, engine, acting):
    saved = services.responses.save_multiple_responses(
        "u1",
        [
            ResponseSubmit(questionId=acting["years"].id, response="0-1"),
            {"question_id": acting["specialty"].id, "response": ["theater"]},
            {"questionId": acting["years"].id, "response": "2-5"},
        ],
    )
    assert [s.response for s in saved] == ["0-1", ["theater"], "2-5"]
    assert _row_count(engine, "u1", acting["years"].id) == 1


def test_batch_partial_failure_keeps_successful_writes(services, acting):
    with pytest.raises(AggregateError) as exc:
        services.responses.save_multiple_responses(
            "u1",
            [
                {"question_id": acting["years"].id, "response": "6-10"},
                {"question_id": 9999, "response": "x"},
                {"question_id": acting["specialty"].id, "response": "film"},
                {"question_id": acting["specialty"].id, "response": ["film"]},
            ],
        )
    err = exc.value
    assert [f.index for f in err.failures] == [1, 2]
    assert [f.error.code for f in err.failures] == ["NOT_FOUND", "VALIDATION_FAILED"]
    assert len(err.saved) == 2
    assert services.responses.get_response("u1", acting["years"].id).response == "6-10"
    assert services.responses.get_response("u1", acting["specialty"].id).response == ["film"]


def test_delete_is_idempotent(services, engine, acting):
    years = acting["years"]
    services.responses.save_response("u1", years.id, "0-1")
    get_buffered_events()
    assert services.responses.delete_response("u1", years.id) is True
    assert services.responses.delete_response("u1", years.id) is False
    assert _row_count(engine, "u1", years.id) == 0
    assert [e["type"] for e in get_buffered_events()] == [RESPONSE_DELETED]


def test_storage_failure_propagates_without_event(services, acting, mocker):
    mocker.patch.object(
        services.responses._store, "upsert", side_effect=RuntimeError("disk full")
    )
    with pytest.raises(RuntimeError):
        services.responses.save_response("u1", acting["years"].id, "0-1")
    assert get_buffered_events() == []


def test_batch_survives_a_failing_event_subscriber(services, acting):
    def explode(event):
        raise RuntimeError("listener down")

    unsubscribe = subscribe(explode)
    try:
        saved = services.responses.save_multiple_responses(
            "u1",
            [
                {"question_id": acting["years"].id, "response": "0-1"},
                {"question_id": acting["specialty"].id, "response": ["film"]},
            ],
        )
    finally:
        unsubscribe()
    assert [s.response for s in saved] == ["0-1", ["film"]]
    assert services.responses.get_response("u1", acting["specialty"].id).response == ["film"]


def test_concurrent_saves_to_one_pair_leave_a_single_row(tmp_path, sqlite_migrations_dir):
    file_engine = build_engine(f"sqlite+pysqlite:///{tmp_path / 'questionnaire.db'}")
    try:
        apply_migrations(file_engine, migrations_dir=sqlite_migrations_dir)
        svc = Services.for_engine(file_engine)
        category = svc.categories.create_category({"name": "Acting", "slug": "acting"})
        question = svc.questions.create_question(
            {"category_id": category.id, "question": "Stage name?", "slug": "stage_name", "question_type": "text"}
        )
        submitted = [f"name-{n}" for n in range(16)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda value: svc.responses.save_response("u1", question.id, value), submitted))

        assert _row_count(file_engine, "u1", question.id) == 1
        assert svc.responses.get_response("u1", question.id).response in submitted
    finally:
        file_engine.dispose()
