import logging

import pytest

from ..declarative import Property, ToOne
from ..exceptions import InvalidDeclarationError, UnknownResourceTypeError
from ..resource import Resource
from .testing import Article, Person


@pytest.fixture
def target():
    from ..registry import TypeRegistry

    return TypeRegistry


def test_register(target):
    registry = target()
    assert registry.register(Person) is Person

    assert registry.factory_for("people") is Person
    assert registry.descriptor_for("people") is Person.descriptor()
    assert "people" in registry
    assert "articles" not in registry
    assert list(registry) == ["people"]


def test_unknown_type(target):
    registry = target([Person, Article])

    with pytest.raises(UnknownResourceTypeError) as e:
        registry.factory_for("authors")
    assert e.value.name == "authors"
    assert e.value.message == 'no resource known as "authors" (known types are "articles" and "people")'
    assert str(e.value) == e.value.message
    assert e.value.sources == []


def test_unknown_type_empty_registry(target):
    with pytest.raises(UnknownResourceTypeError) as e:
        target().factory_for("people")
    assert e.value.message == 'no resource known as "people"'


def test_last_registration_wins(target):
    class Author(Resource):
        class Meta:
            type = "people"
            attributes = {"pen_name": Property()}

    registry = target([Person])
    registry.register(Author)

    assert registry.factory_for("people") is Author
    assert list(registry.descriptor_for("people").members) == ["pen_name"]


def test_relationship_without_target(target, caplog):
    class Bookmark(Resource):
        class Meta:
            type = "bookmarks"
            attributes = {"target": ToOne(), "owner": ToOne(Person)}

    with caplog.at_level(logging.WARNING, logger="jsonapi_graph.registry"):
        target([Person, Bookmark])

    messages = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(messages) == 1
    assert messages[0].startswith("relationship target of 'bookmarks' declares no target type")


def test_register_non_resource(target):
    registry = target()

    with pytest.raises(InvalidDeclarationError):
        registry.register(object)
    with pytest.raises(InvalidDeclarationError):
        registry.register(Person(id="9"))
