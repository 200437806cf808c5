import pytest

from .testing import Article, Comment, Person


def test_keywords_are_routed():
    author = Person(id="9", name="Jane")
    comments = [Comment(id="1"), Comment(id="2")]
    article = Article(id="1", title="Hi", author=author, comments=comments, extra=True)

    assert article.id == "1"
    assert article.href is None
    assert article["title"] == "Hi"
    assert article["extra"] is True
    assert "author" not in article
    assert article.related("author") is author
    assert article.related("comments") == comments
    assert article.placeholder is False


def test_unset_members():
    article = Article()

    assert article.id is None
    assert "title" not in article
    with pytest.raises(KeyError):
        article["title"]
    assert article.related("author") is None
    assert article.related("author", default=42) == 42
    assert list(article.attributes) == []
    assert list(article.relationships) == []


def test_item_access():
    article = Article(title="Hi")
    article["title"] = "Hello"
    article["body"] = None

    assert article["title"] == "Hello"
    assert "body" in article
    assert article["body"] is None

    del article["body"]
    assert "body" not in article


def test_set_related():
    article = Article()
    author = Person(id="9")

    article.set_related("author", author)
    assert article.related("author") is author

    article.set_related("author", None)
    assert "author" not in article.relationships

    article.set_related("comments", (c for c in [Comment(id="1")]))
    assert [c.id for c in article.related("comments")] == ["1"]

    article.unset_related("comments")
    assert "comments" not in article.relationships


def test_set_related_kind_mismatch():
    article = Article()

    with pytest.raises(TypeError):
        article.set_related("author", [Person(id="9")])
    with pytest.raises(TypeError):
        article.set_related("comments", Comment(id="1"))
    with pytest.raises(TypeError):
        article.set_related("comments", ["1"])
    with pytest.raises(TypeError):
        article.set_related("author", "9")


def test_placeholder_for():
    person = Person.placeholder_for("9")

    assert person.id == "9"
    assert person.resource_type == "people"
    assert person.placeholder is True
    assert list(person.attributes) == []
    assert list(person.relationships) == []


def test_repr():
    assert repr(Person(id="9")) == "<Person people/9>"
    assert repr(Person()) == "<Person people (unsaved)>"
    assert repr(Person.placeholder_for("9")) == "<Person people/9 placeholder>"


def test_identity_semantics():
    assert Person(id="9") != Person(id="9")
