import pytest
from bson import ObjectId

from crudcore.api.interceptors.entity_sanitizer import RULES, EntitySanitizerInterceptor, sanitize


def test_sanitizes_nested_documents():
    """
    Behavior:
        - `password` and callables are removed, `_id` becomes `id`, and nested
          mappings get the same treatment.
    """
    document = {"_id": "abc", "password": "x", "nested": {"_id": "y", "fn": lambda: None}}

    assert sanitize(document) == {"id": "abc", "nested": {"id": "y"}}


def test_object_id_identifier_is_stringified():
    oid = ObjectId()

    assert sanitize({"_id": oid, "name": "n"}) == {"id": str(oid), "name": "n"}


def test_int_identifier_is_kept():
    assert sanitize({"_id": 7}) == {"id": 7}


def test_private_fields_are_dropped():
    assert sanitize({"__v": 0, "_internal": {"a": 1}, "name": "n"}) == {"name": "n"}


def test_lists_are_sanitized_element_wise():
    documents = [{"_id": "a", "password": "p"}, {"_id": "b", "tags": [{"_id": "t", "label": "x"}]}]

    assert sanitize(documents) == [{"id": "a"}, {"id": "b", "tags": [{"id": "t", "label": "x"}]}]


def test_object_id_values_are_stringified():
    owner = ObjectId()

    assert sanitize({"owner": owner}) == {"owner": str(owner)}


def test_scalars_and_falsy_values_are_kept():
    document = {"count": 0, "flag": False, "note": None, "empty": {}, "items": []}

    assert sanitize(document) == document


def test_input_is_not_mutated():
    document = {"_id": "abc", "password": "x", "nested": {"_id": "y"}}

    sanitize(document)

    assert document == {"_id": "abc", "password": "x", "nested": {"_id": "y"}}


def test_rule_order_is_explicit():
    """`_id` is renamed before the generic underscore rule can drop it."""
    names = [rule.name for rule in RULES]

    assert names.index("public_id") < names.index("private")
    assert names[0] == "password"


@pytest.mark.asyncio
class TestEntitySanitizerInterceptor:

    async def test_sanitizes_handler_result(self):
        interceptor = EntitySanitizerInterceptor()

        async def call_next():
            return {"data": [{"_id": "a", "password": "p"}]}

        assert await interceptor.intercept(None, call_next) == {"data": [{"id": "a"}]}

    async def test_none_result_is_passed_through(self):
        interceptor = EntitySanitizerInterceptor()

        async def call_next():
            return None

        assert await interceptor.intercept(None, call_next) is None
