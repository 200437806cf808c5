import pytest

from ..declarative import Date, Property, ToMany, ToOne
from ..exceptions import InvalidDeclarationError
from ..models import (
    AttributeKind,
    ResourceAttributeDescriptor,
    ResourceToManyRelationshipDescriptor,
    ResourceToOneRelationshipDescriptor,
)
from ..resource import Resource
from .testing import Article, Comment


@pytest.fixture
def target():
    from ..declarative import build_descriptor

    return build_descriptor


class TestBuildDescriptor:
    def test_basic(self, target):
        descr = target(Article)

        assert descr.name == "articles"
        assert list(descr.members) == ["title", "body", "published_at", "author", "comments"]
        assert [m.kind for m in descr.members.values()] == [
            AttributeKind.PROPERTY,
            AttributeKind.PROPERTY,
            AttributeKind.DATE,
            AttributeKind.TO_ONE,
            AttributeKind.TO_MANY,
        ]
        assert list(descr.attributes) == ["title", "body", "published_at"]
        assert list(descr.relationships) == ["author", "comments"]
        assert isinstance(descr.attributes["published_at"], ResourceAttributeDescriptor)
        assert isinstance(descr.relationships["author"], ResourceToOneRelationshipDescriptor)
        assert isinstance(descr.relationships["comments"], ResourceToManyRelationshipDescriptor)
        assert all(m.parent is descr for m in descr.members.values())

    def test_destination(self, target):
        assert target(Article).relationships["author"].destination == "people"
        assert target(Article).relationships["comments"].destination == "comments"
        # declared with a class, resolved lazily
        assert target(Comment).relationships["author"].destination == "people"

    def test_destination_omitted(self, target):
        class Bookmark(Resource):
            class Meta:
                type = "bookmarks"
                attributes = {"target": ToOne()}

        assert target(Bookmark).relationships["target"].destination is None

    def test_forward_reference_by_class(self, target):
        class Node(Resource):
            class Meta:
                type = "nodes"
                attributes = {"children": ToMany("nodes")}

        class Tree(Resource):
            class Meta:
                type = "trees"
                attributes = {"root": ToOne(Node)}

        assert target(Tree).relationships["root"].destination == "nodes"

    def test_missing_meta(self, target):
        class Nothing(Resource):
            pass

        with pytest.raises(InvalidDeclarationError):
            target(Nothing)

    def test_missing_type(self, target):
        class Untyped(Resource):
            class Meta:
                attributes = {"a": Property()}

        with pytest.raises(InvalidDeclarationError):
            target(Untyped)

    @pytest.mark.parametrize("name", ["id", "href", "links"])
    def test_reserved_names(self, target, name):
        class Reserved(Resource):
            class Meta:
                type = "reserved"
                attributes = {name: Property()}

        with pytest.raises(InvalidDeclarationError):
            target(Reserved)

    def test_invalid_declaration(self, target):
        class Invalid(Resource):
            class Meta:
                type = "invalid"
                attributes = {"a": str}

        with pytest.raises(InvalidDeclarationError):
            target(Invalid)

    def test_invalid_target(self, target):
        class Invalid(Resource):
            class Meta:
                type = "invalid"
                attributes = {"a": ToOne(42)}

        with pytest.raises(InvalidDeclarationError):
            target(Invalid)

    def test_inherited_meta(self, target):
        class Feature(Article):
            pass

        descr = target(Feature)
        assert descr.name == "articles"
        assert list(descr.members) == list(target(Article).members)


def test_descriptor_is_cached_per_class():
    class Note(Resource):
        class Meta:
            type = "notes"
            attributes = {"text": Property(), "at": Date()}

    assert Note.descriptor() is Note.descriptor()
    assert Note().resource_type == "notes"
