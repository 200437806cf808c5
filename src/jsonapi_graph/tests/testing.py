from ..declarative import Date, Property, ToMany, ToOne
from ..registry import TypeRegistry
from ..resource import Resource


class Person(Resource):
    class Meta:
        type = "people"
        attributes = {
            "name": Property(),
            "website": Property(),
        }


class Comment(Resource):
    class Meta:
        type = "comments"
        attributes = {
            "body": Property(),
            "author": ToOne(Person),
        }


class Article(Resource):
    class Meta:
        type = "articles"
        attributes = {
            "title": Property(),
            "body": Property(),
            "published_at": Date(),
            "author": ToOne("people"),
            "comments": ToMany("comments"),
        }


class Tag(Resource):
    class Meta:
        type = "tags"


def make_registry() -> TypeRegistry:
    return TypeRegistry([Person, Comment, Article, Tag])
