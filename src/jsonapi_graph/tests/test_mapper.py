import datetime
import json

import pytest

from ..exceptions import MalformedDocumentError, UnknownResourceTypeError
from ..serde.utils import JSONPointer
from .testing import Article, Comment, Person, Tag, make_registry


@pytest.fixture
def target():
    from ..mapper import ResourceMapper

    return ResourceMapper(make_registry())


def test_register():
    from ..mapper import ResourceMapper

    mapper = ResourceMapper()
    mapper.register(Person, Comment)

    assert list(mapper.registry) == ["people", "comments"]
    with pytest.raises(UnknownResourceTypeError):
        mapper.deserialize({"articles": [{"id": "1"}]})


def test_round_trip(target):
    document = {
        "articles": [
            {
                "id": "1",
                "title": "Hi",
                "published_at": "2014-08-23T10:00:00+02:00",
                "links": {"author": "9", "comments": ["5", "12"]},
            },
        ],
        "people": [{"id": "9", "name": "Jane", "website": None}],
        "comments": [
            {"id": "5", "body": "First!", "links": {"author": "9"}},
            {"id": "12", "body": "Second", "links": {"author": None}},
        ],
        "tags": [{"id": "x"}],
    }
    store = target.deserialize(document)

    assert target.serialize(store) == document


def test_round_trip_of_instances(target):
    author = Person(id="9", name="Jane")
    article = Article(
        id="1",
        title="Hi",
        published_at=datetime.datetime(2014, 8, 23, 8, tzinfo=datetime.timezone.utc),
        author=author,
        comments=[Comment(id="5", author=author)],
    )
    store = target.deserialize(target.serialize([article, author] + article.related("comments")))

    restored = store.find("articles", "1")
    assert restored is not article
    assert restored["title"] == "Hi"
    assert restored["published_at"] == article["published_at"]
    assert restored.related("author") is store.find("people", "9")
    assert [c.id for c in restored.related("comments")] == ["5"]
    assert restored.related("comments")[0].related("author") is store.find("people", "9")


def test_loads(target):
    store = target.loads(
        '{"comments": [{"id": "5", "links": {"author": {"id": "9"}}}],'
        ' "linked": {"people": [{"id": "9", "name": "Jane"}]}}'
    )

    assert store.find("comments", "5").related("author") is store.find("people", "9")


def test_loads_into_store(target):
    store = target.loads('{"people": [{"id": "9"}]}')
    assert target.loads('{"tags": [{"id": "x"}]}', store) is store
    assert len(store) == 2


@pytest.mark.parametrize("text", ["", "{", "[1,]", b"\xff"])
def test_loads_invalid_json(target, text):
    with pytest.raises(MalformedDocumentError) as e:
        target.loads(text)
    assert e.value.sources == [JSONPointer()]
    assert "invalid JSON" in str(e.value)


def test_dumps(target):
    text = target.dumps([Tag(id="x"), Person(id="9", name="Jane")], sort_keys=True)

    assert json.loads(text) == {"tags": [{"id": "x"}], "people": [{"id": "9", "name": "Jane"}]}
    assert text == '{"people": [{"id": "9", "name": "Jane"}], "tags": [{"id": "x"}]}'


def test_formatter_per_run():
    from ..mapper import ResourceMapper
    from ..serde.formatter import ValueFormatter

    clock = iter(
        [
            datetime.datetime(2020, 1, 1, tzinfo=datetime.timezone.utc),
            datetime.datetime(2021, 1, 1, tzinfo=datetime.timezone.utc),
        ]
    )
    created = []

    def factory():
        now = next(clock)
        formatter = ValueFormatter(now=lambda: now)
        created.append(formatter)
        return formatter

    mapper = ResourceMapper(make_registry(), formatter_factory=factory)
    s1 = mapper.deserialize({"articles": [{"id": "1", "published_at": "?"}]})
    s2 = mapper.deserialize({"articles": [{"id": "1", "published_at": "?"}]})

    assert len(created) == 2
    assert s1.find("articles", "1")["published_at"].year == 2020
    assert s2.find("articles", "1")["published_at"].year == 2021


def test_relationship_without_target_is_not_read_back():
    from ..declarative import ToOne
    from ..mapper import ResourceMapper
    from ..resource import Resource

    class Bookmark(Resource):
        class Meta:
            type = "bookmarks"
            attributes = {"target": ToOne()}

    mapper = ResourceMapper(make_registry())
    mapper.register(Bookmark)
    document = mapper.serialize([Bookmark(id="1", target=Person(id="9"))])

    assert document == {"bookmarks": [{"id": "1", "links": {"target": "9"}}]}
    with pytest.raises(MalformedDocumentError) as e:
        mapper.deserialize(document)
    assert e.value.sources == [JSONPointer("/bookmarks/0/links/target")]

    # the payload type makes it readable
    store = mapper.deserialize(
        {"bookmarks": [{"id": "1", "links": {"target": {"id": "9", "type": "people"}}}]}
    )
    assert isinstance(store.find("bookmarks", "1").related("target"), Person)
