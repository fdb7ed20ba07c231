from __future__ import annotations

import pytest

from literecord.fields import FieldState, is_empty


def test_constructor_bulk_assigns_mapping_then_keywords():
    state = FieldState({"name": "Ana", "email": "a@x.com"}, name="Bea")

    assert state.to_dict() == {"name": "Bea", "email": "a@x.com"}


def test_dump_accepts_pairs_and_later_keys_win():
    state = FieldState()
    state.dump([("name", "Ana"), ("name", "Bea"), ("email", None)])

    assert state.name == "Bea"
    assert state.is_set("email")


def test_attribute_and_item_access_share_the_same_fields():
    state = FieldState()
    state.name = "Ana"
    state["email"] = "a@x.com"

    assert state["name"] == "Ana"
    assert state.email == "a@x.com"
    assert "email" in state
    assert list(state.field_names()) == ["name", "email"]


def test_missing_field_raises_attribute_error():
    state = FieldState()

    with pytest.raises(AttributeError):
        state.name  # noqa: B018
    assert getattr(state, "name", "fallback") == "fallback"


def test_underscore_names_are_not_fields():
    state = FieldState()
    state._cache = 1

    assert not state.is_set("_cache")
    assert state.to_dict() == {}


@pytest.mark.parametrize("value", [None, "", b""])
def test_empty_values(value):
    assert is_empty(value)


@pytest.mark.parametrize("value", [0, False, "0", " ", [], 0.0])
def test_non_empty_values(value):
    assert not is_empty(value)


def test_set_to_empty_is_set_but_not_present_by_default():
    state = FieldState(email="")

    assert state.is_set("email")
    assert not state.is_present("email")
    assert state.is_present("email", empty_as_unset=False)


def test_clear_unsets_field():
    state = FieldState(name="Ana")
    state.clear("name")
    state.clear("never_set")

    assert not state.is_set("name")
    with pytest.raises(AttributeError):
        state.name  # noqa: B018


def test_del_removes_field():
    state = FieldState(name="Ana")
    del state.name
    state["email"] = "a@x.com"
    del state["email"]

    assert state.to_dict() == {}


def test_snapshot_is_restricted_and_ordered_by_field_list():
    state = FieldState(email="a@x.com", extra="ignored", name="Ana", phone=None)

    snapshot = state.snapshot(["id", "name", "email", "phone"])

    assert list(snapshot.items()) == [("name", "Ana"), ("email", "a@x.com")]


def test_snapshot_strict_mode_keeps_explicit_empties():
    state = FieldState(name="", phone=None)

    assert state.snapshot(["name", "phone", "email"], empty_as_unset=False) == {
        "name": "",
        "phone": None,
    }


def test_equality_and_repr():
    assert FieldState(name="Ana") == FieldState({"name": "Ana"})
    assert FieldState(name="Ana") != FieldState(name="Bea")
    assert repr(FieldState(name="Ana")) == "FieldState({'name': 'Ana'})"


def test_field_named_data_can_be_set_by_keyword():
    state = FieldState(title="t", data="blob")

    assert state.to_dict() == {"title": "t", "data": "blob"}
    assert FieldState({"title": "t"}, data="blob").data == "blob"


@pytest.mark.parametrize("name", ["snapshot", "dump", "to_dict", "is_set"])
def test_attribute_assignment_rejects_names_of_class_attributes(name):
    state = FieldState()

    with pytest.raises(AttributeError, match="item access"):
        setattr(state, name, "x")

    assert not state.is_set(name)


def test_item_access_reaches_fields_named_like_class_attributes():
    state = FieldState({"snapshot": "nightly"})
    state["dump"] = "full"

    assert state["snapshot"] == "nightly"
    assert state["dump"] == "full"
    assert state.snapshot(["snapshot", "dump"]) == {"snapshot": "nightly", "dump": "full"}
