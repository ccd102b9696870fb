from __future__ import annotations

from typing import Optional

import pytest
from sample_models import Address, Bare, Blob, Color, Counter, Journal, Node, Opaque, Session, User

from fusion_model import Model, engine, model_spec, variable
from fusion_model.domain.specs import RecordSpec
from fusion_model.errors import (
    MissingRequiredFieldError,
    SchemaError,
    TypeMismatchError,
    UnknownFieldError,
    UnsupportedOperationError,
)

EXPECTED_USER_ID = 7
EXPECTED_SCORE = 9.5
DEFAULT_RETRIES = 3


def test_counter_defaults_when_document_is_empty():
    counter = engine.from_json(Counter.record_spec, {})

    assert counter.count == 0
    document = engine.to_json(counter)
    assert document == {"count": 0, "model_type": "Counter"}
    assert list(document) == ["count", "model_type"]


def test_from_json_decodes_nested_records_lists_maps_and_enums(user_document):
    user = User.from_json(user_document)

    assert user.user_id == EXPECTED_USER_ID
    assert user.name == "Ada"
    assert user.score == EXPECTED_SCORE
    assert user.address == Address(street="Main St", zip_code="12345")
    assert isinstance(user.previous_addresses[0], Address)
    assert user.previous_addresses[0].zip_code == ""
    assert user.tags == {"role": "admin"}
    assert user.nickname is None
    assert user.favorite is Color.GREEN


def test_to_json_follows_declaration_order_and_encodes_nested_values(user_document):
    document = User.from_json(user_document).to_json()

    assert list(document) == [
        "id",
        "name",
        "score",
        "address",
        "previous_addresses",
        "tags",
        "nickname",
        "favorite",
        "model_type",
    ]
    assert document["address"] == {"street": "Main St", "zip": "12345", "model_type": "Address"}
    assert document["previous_addresses"] == [
        {"street": "Old Rd", "zip": "", "model_type": "Address"}
    ]
    assert document["favorite"] == "green"
    assert document["model_type"] == "User"


def test_round_trip_reproduces_record(user_document):
    user = User.from_json(user_document)

    assert engine.from_json(User.record_spec, engine.to_json(user)) == user


def test_self_referencing_records_resolve_by_type_name():
    tree = Node.from_json({"label": "root", "children": [{"label": "leaf"}]})

    assert isinstance(tree.children[0], Node)
    assert tree.children[0].children == ()
    assert tree.to_json()["children"] == [
        {"label": "leaf", "children": [], "model_type": "Node"}
    ]


def test_int_is_accepted_for_float_fields(user_document):
    user_document["score"] = 3

    score = User.from_json(user_document).score

    assert isinstance(score, float)
    assert score == 3.0


def test_null_value_falls_back_to_default():
    assert Counter.from_json({"count": None}).count == 0


def test_field_without_type_or_default_is_required():
    with pytest.raises(MissingRequiredFieldError) as excinfo:
        Bare.from_json({})
    assert excinfo.value.path == "token"

    with pytest.raises(MissingRequiredFieldError):
        Bare.from_json({"token": None})
    with pytest.raises(MissingRequiredFieldError):
        Bare()
    assert Bare(token={"a": 1}).to_json() == {"token": {"a": 1}, "model_type": "Bare"}


def test_optional_field_without_default_is_required():
    class Tagged(Model):
        record_spec = model_spec(variable("label", Optional[str]))

    with pytest.raises(MissingRequiredFieldError):
        Tagged.from_json({})
    assert Tagged(label=None).label is None


def test_null_default_makes_field_nullable(user_document):
    del user_document["nickname"]

    assert User.from_json(user_document).nickname is None
    assert Blob.from_json({}).data is None


def test_missing_required_field_raises_with_path(user_document):
    del user_document["id"]

    with pytest.raises(MissingRequiredFieldError) as excinfo:
        User.from_json(user_document)

    assert excinfo.value.type_name == "User"
    assert excinfo.value.path == "id"


def test_missing_nested_field_reports_dotted_path(user_document):
    user_document["address"] = {"zip": "000"}

    with pytest.raises(MissingRequiredFieldError) as excinfo:
        User.from_json(user_document)

    assert excinfo.value.type_name == "Address"
    assert excinfo.value.path == "address.street"


def test_nested_primitive_raises_type_mismatch(user_document):
    user_document["address"] = "Main St"

    with pytest.raises(TypeMismatchError) as excinfo:
        User.from_json(user_document)

    assert excinfo.value.path == "address"
    assert excinfo.value.expected == "Address"
    assert excinfo.value.actual == "str"


def test_list_element_mismatch_reports_index(user_document):
    user_document["previous_addresses"] = [{"street": "Old Rd"}, 5]

    with pytest.raises(TypeMismatchError) as excinfo:
        User.from_json(user_document)

    assert excinfo.value.path == "previous_addresses[1]"


@pytest.mark.parametrize(
    "key, value",
    [
        ("id", True),
        ("id", "7"),
        ("name", 1),
        ("score", "high"),
        ("tags", ["role"]),
        ("favorite", "purple"),
    ],
)
def test_scalar_mismatches_raise(user_document, key, value):
    user_document[key] = value

    with pytest.raises(TypeMismatchError):
        User.from_json(user_document)


def test_document_must_be_a_mapping():
    with pytest.raises(TypeMismatchError):
        Counter.from_json(["count", 1])


def test_failed_decode_never_constructs_record(monkeypatch, user_document):
    constructed = []
    original = User._construct.__func__

    def spy(cls, values):
        constructed.append(cls)
        return original(cls, values)

    monkeypatch.setattr(User, "_construct", classmethod(spy))
    user_document["favorite"] = "purple"

    with pytest.raises(TypeMismatchError):
        User.from_json(user_document)

    assert constructed == []


def test_fields_excluded_from_from_json_ignore_document():
    session = Session.from_json(
        {"token": "t", "password": "p", "cache": {"a": 1}, "retries": 9}
    )

    assert session.cache == {}
    assert session.retries == DEFAULT_RETRIES
    assert session.password == "p"


def test_fields_excluded_from_to_json_are_omitted():
    session = Session(token="t", password="secret")

    document = session.to_json()

    assert "password" not in document
    assert document == {"token": "t", "cache": {}, "retries": 3, "model_type": "UserSession"}


def test_mutable_defaults_are_not_shared():
    first = Journal()
    first.entries.append("x")

    second = Journal()

    assert second.entries == []


def test_immutable_records_store_read_only_containers(user_document):
    user = User.from_json(user_document)

    assert isinstance(user.previous_addresses, tuple)
    with pytest.raises(TypeError):
        user.tags["role"] = "guest"
    with pytest.raises(AttributeError):
        user.previous_addresses.append(Address(street="x"))


def test_copy_with_result_shares_no_containers_with_source(user_document):
    user = User.from_json(user_document)

    renamed = user.copy_with(name="B")

    assert renamed.previous_addresses == user.previous_addresses
    assert renamed.previous_addresses is not user.previous_addresses
    assert renamed.tags is not user.tags


def test_mutable_copy_with_deep_copies_containers():
    journal = Journal(entries=["a"])

    copy = journal.copy_with()
    copy.entries.append("b")

    assert journal.entries == ["a"]
    assert copy.entries == ["a", "b"]


def test_any_field_does_not_alias_caller_document():
    document = {"data": {"k": [1]}}
    blob = Blob.from_json(document)

    document["data"]["k"].append(2)

    assert blob.to_json() == {"data": {"k": [1]}, "model_type": "Blob"}
    with pytest.raises(TypeError):
        blob.data["k"] = []


@pytest.mark.parametrize("value", [{1, 2}, object(), {1: "a"}])
def test_any_field_rejects_non_json_values(value):
    with pytest.raises(TypeMismatchError):
        Blob(data=value)
    with pytest.raises(TypeMismatchError):
        Blob.from_json({"data": value})


def test_any_numbers_compare_by_json_text():
    assert Blob(data=1) != Blob(data=1.0)
    assert Blob(data=[1, "a"]) == Blob.from_json({"data": [1, "a"]})


def test_unknown_keys_are_ignored_by_default():
    assert Counter.from_json({"count": 2, "extra": True}).count == 2


def test_strict_keys_rejects_unknown_keys(monkeypatch):
    monkeypatch.setenv("STRICT_KEYS", "true")

    with pytest.raises(UnknownFieldError):
        Counter.from_json({"count": 2, "extra": True})

    # The reserved type entry is never treated as unknown.
    assert Counter.from_json({"count": 2, "model_type": "Counter"}).count == 2


def test_type_key_follows_settings(monkeypatch):
    monkeypatch.setenv("MODEL_TYPE_KEY", "kind")

    assert Counter(count=1).to_json() == {"count": 1, "kind": "Counter"}


def test_unbound_spec_cannot_decode():
    with pytest.raises(SchemaError):
        engine.from_json(RecordSpec(), {})


def test_disabled_operations():
    opaque = Opaque()

    assert opaque.secret == "hidden"
    assert opaque.to_json() == {"model_type": "Opaque"}
    with pytest.raises(UnsupportedOperationError):
        Opaque.from_json({})
    with pytest.raises(UnsupportedOperationError):
        opaque.copy_with(secret="x")


def test_copy_with_without_overrides_is_identity(user_document):
    user = User.from_json(user_document)

    assert engine.copy_with(user, {}) == user
    assert user.copy_with() == user


def test_copy_with_replaces_only_overridden_fields(user_document):
    user = User.from_json(user_document)

    renamed = engine.copy_with(user, {"name": "Grace"})

    assert renamed.name == "Grace"
    assert user.name == "Ada"
    for attr in User.record_spec.attrs:
        if attr != "name":
            assert getattr(renamed, attr) == getattr(user, attr)


def test_copy_with_coerces_override_values(user_document):
    user = User.from_json(user_document)

    moved = user.copy_with(address={"street": "New St"}, nickname=None)

    assert moved.address == Address(street="New St")
    assert moved.nickname is None


def test_copy_with_rejects_unknown_and_mismatched_values(user_document):
    user = User.from_json(user_document)

    with pytest.raises(UnknownFieldError):
        user.copy_with(age=3)
    with pytest.raises(TypeMismatchError):
        user.copy_with(name=None)
    with pytest.raises(TypeMismatchError):
        user.copy_with(name=5)


def test_render_lists_key_value_pairs():
    assert engine.render(Counter(count=3)) == "(count: 3, model_type: Counter)"


def test_document_equals_ignores_key_order_but_not_bool_int():
    assert engine.document_equals({"a": 1, "b": 2}, {"b": 2, "a": 1})
    assert not engine.document_equals({"a": True}, {"a": 1})
