"""
:py:mod:`jsonapi_graph.declarative` turns the ``Meta`` inner class of a resource
class into a :py:class:`ResourceDescriptor`.

Synopsis
--------

.. code-block:: python

   class Article(Resource):
       class Meta:
           type = "articles"
           attributes = {
               "title": Property(),
               "published_at": Date(),
               "author": ToOne("people"),
               "comments": ToMany(Comment),
           }

"""

import collections.abc
import dataclasses
import typing

from .deferred import Deferred
from .exceptions import InvalidDeclarationError
from .models import (
    AttributeKind,
    ResourceAttributeDescriptor,
    ResourceDescriptor,
    ResourceMemberDescriptor,
    ResourceToManyRelationshipDescriptor,
    ResourceToOneRelationshipDescriptor,
)

RESERVED_NAMES = frozenset(["id", "href", "links"])

Target = typing.Union[None, str, typing.Type["resource.Resource"]]


class Attr:
    kind: typing.ClassVar[AttributeKind]

    def build(self, name: str) -> ResourceMemberDescriptor:
        return ResourceAttributeDescriptor(name, self.kind)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Property(Attr):
    kind = AttributeKind.PROPERTY


class Date(Attr):
    kind = AttributeKind.DATE


class Relationship(Attr):
    """
    A relationship to resources of the type named by ``target``, given as a type
    name or a resource class.

    A relationship declared without a target learns the type of its targets
    from the ``type`` member of the wire payload. The serializer writes bare
    ids, so such a relationship is not read back from a document it wrote.
    """

    target: Target

    def _destination(self, name: str) -> typing.Union[None, str, Deferred[str]]:
        from .resource import Resource

        if self.target is None or isinstance(self.target, str):
            return self.target
        if isinstance(self.target, type) and issubclass(self.target, Resource):
            return Deferred(lambda class_: class_.descriptor().name, self.target)
        raise InvalidDeclarationError(
            f"target of relationship {name} must be a type name or a resource class, got {self.target!r}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target!r})"

    def __init__(self, target: Target = None):
        self.target = target


class ToOne(Relationship):
    """
    A to-one relationship; see :py:class:`Relationship` for ``target``.
    """

    kind = AttributeKind.TO_ONE

    def build(self, name: str) -> ResourceMemberDescriptor:
        return ResourceToOneRelationshipDescriptor(name, self._destination(name))


class ToMany(Relationship):
    """
    A to-many relationship; see :py:class:`Relationship` for ``target``.
    """

    kind = AttributeKind.TO_MANY

    def build(self, name: str) -> ResourceMemberDescriptor:
        return ResourceToManyRelationshipDescriptor(name, self._destination(name))


@dataclasses.dataclass
class Meta:
    type: typing.Optional[str] = None
    attributes: typing.Mapping[str, Attr] = dataclasses.field(default_factory=dict)


def handle_meta(meta: typing.Type) -> Meta:
    attrs = {k: v for k, v in vars(meta).items() if not k.startswith("__")}
    type_ = attrs.get("type")
    if type_ is not None and (not isinstance(type_, str) or not type_):
        raise InvalidDeclarationError(f"type must be a non-empty string, got {type_!r}")

    attributes = attrs.get("attributes", {})
    if not isinstance(attributes, collections.abc.Mapping):
        raise InvalidDeclarationError("attributes must be a mapping of names to declarations")
    for name, attr in attributes.items():
        if not isinstance(name, str):
            raise InvalidDeclarationError(f"attribute name must be a string, got {name!r}")
        if name in RESERVED_NAMES:
            raise InvalidDeclarationError(f"{name} is reserved and cannot be declared")
        if not isinstance(attr, Attr):
            raise InvalidDeclarationError(
                f"declaration of {name} must be Property, Date, ToOne or ToMany, got {attr!r}"
            )
    return Meta(type=type_, attributes=attributes)


def build_descriptor(resource_class: typing.Type["resource.Resource"]) -> ResourceDescriptor:
    meta_class = getattr(resource_class, "Meta", None)
    if meta_class is None:
        raise InvalidDeclarationError(f"{resource_class.__name__} has no Meta declaration")
    meta = handle_meta(meta_class)
    if meta.type is None:
        raise InvalidDeclarationError(f"{resource_class.__name__}.Meta does not declare a type")
    return ResourceDescriptor(
        name=meta.type,
        members=[attr.build(name) for name, attr in meta.attributes.items()],
    )


if typing.TYPE_CHECKING:
    from . import resource  # noqa: E402
