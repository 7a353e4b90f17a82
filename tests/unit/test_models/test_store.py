"""Tests for the in-memory mission store."""

from datetime import datetime, timedelta

import pytest

from wayfinder.errors import InvalidStatusTransition, MissionNotFoundError
from wayfinder.models import Mission, Step
from wayfinder.store import MissionStore


def mission(title: str, description: str = "Some research description", minutes_ago: int = 0):
    return Mission(
        title=title,
        description=description,
        created_at=datetime.now() - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def store():
    return MissionStore()


def test_add_and_get(store):
    m = store.add(mission("EV costs"))

    assert store.get(m.id) is m
    assert m.id in store
    assert len(store) == 1


def test_add_rejects_duplicate_id(store):
    m = store.add(mission("EV costs"))

    with pytest.raises(ValueError):
        store.add(m)


def test_get_missing_returns_none(store):
    assert store.get("missing") is None


def test_require_missing_raises(store):
    with pytest.raises(MissionNotFoundError, match="missing"):
        store.require("missing")


def test_set_replaces(store):
    m = store.add(mission("EV costs"))
    replacement = m.model_copy(update={"title": "EV ownership"})

    store.set(replacement)

    assert store.get(m.id).title == "EV ownership"


def test_delete(store):
    m = store.add(mission("EV costs"))

    assert store.delete(m.id) is True
    assert store.delete(m.id) is False
    assert store.get(m.id) is None


def test_all_is_newest_first(store):
    store.add(mission("old", minutes_ago=10))
    store.add(mission("new"))
    store.add(mission("middle", minutes_ago=5))

    assert [m.title for m in store.all()] == ["new", "middle", "old"]


def test_search_matches_title_and_description(store):
    store.add(mission("EV costs", "Electric vehicle ownership"))
    store.add(mission("Solar", "Rooftop panels and EV charging"))
    store.add(mission("Wind", "Offshore turbines"))

    assert {m.title for m in store.search("ev")} == {"EV costs", "Solar"}
    assert store.search("nothing") == []


def test_update_renumbers_steps(store):
    m = store.add(mission("EV costs"))
    steps = [Step(title="B", description="b", order=7), Step(title="A", description="a", order=3)]

    store.update(m.id, title="  EV ownership  ", steps=steps)

    assert m.title == "EV ownership"
    assert [(s.title, s.order, s.status) for s in m.steps] == [("B", 0, "pending"), ("A", 1, "pending")]


def test_update_resets_step_state(store):
    m = store.add(mission("EV costs"))
    step = Step(title="A", description="a")
    step.mark_executing()
    step.mark_error("boom")

    store.update(m.id, steps=[step])

    assert m.steps[0].status == "pending"
    assert m.steps[0].error is None
    assert m.steps[0].id == step.id


def test_update_rejects_researched_mission(store):
    m = store.add(mission("EV costs"))
    m.transition_to("researching")

    with pytest.raises(InvalidStatusTransition):
        store.update(m.id, title="New")
