import collections.abc
import typing
from collections import OrderedDict

from .declarative import build_descriptor
from .models import (
    Missing,
    RelationshipSlot,
    ResourceDescriptor,
    ResourceToManyRelationshipDescriptor,
    ResourceToOneRelationshipDescriptor,
)


class Resource:
    """
    The base class of every resource class.

    A concrete resource class declares its type name and attribute schema
    in an inner ``Meta`` class (see :py:mod:`jsonapi_graph.declarative`).
    Declared relationship names passed as keyword arguments go to
    :py:attr:`relationships`, every other keyword goes to :py:attr:`attributes`.

    :param Optional[str] id: the identifier; ``None`` for resources not saved yet.
    :param Optional[str] href: the location of the resource.
    """

    id: typing.Optional[str]
    """
    The identifier of the resource, ``None`` until the resource is saved.
    """
    href: typing.Optional[str]
    """
    The location of the resource.
    """
    attributes: "OrderedDict[str, typing.Any]"
    """
    Attribute values by name, both declared ones and undeclared ones
    carried over verbatim from the wire. Unset attributes have no key.
    """
    relationships: "OrderedDict[str, RelationshipSlot]"
    """
    Relationship slots by name. Unset relationships have no key.
    """
    placeholder: bool = False
    """
    ``True`` when the instance only stands in for a relationship target
    whose representation was not in the document.
    """

    @classmethod
    def descriptor(cls) -> ResourceDescriptor:
        descr = cls.__dict__.get("_descriptor_")
        if descr is None:
            descr = build_descriptor(cls)
            setattr(cls, "_descriptor_", descr)
        return descr

    @classmethod
    def placeholder_for(cls, id: str) -> "Resource":
        resource = cls(id=id)
        resource.placeholder = True
        return resource

    @property
    def resource_type(self) -> str:
        return self.descriptor().name

    def __getitem__(self, name: str) -> typing.Any:
        return self.attributes[name]

    def __setitem__(self, name: str, value: typing.Any) -> None:
        self.attributes[name] = value

    def __delitem__(self, name: str) -> None:
        del self.attributes[name]

    def __contains__(self, name: str) -> bool:
        return name in self.attributes

    def related(self, name: str, default: typing.Any = None) -> RelationshipSlot:
        value = self.relationships.get(name, Missing)
        return default if value is Missing else value

    def set_related(
        self,
        name: str,
        value: typing.Union[None, "Resource", typing.Iterable["Resource"]],
    ) -> None:
        member = self.descriptor().members.get(name)
        if value is None:
            self.unset_related(name)
        elif isinstance(value, Resource):
            if isinstance(member, ResourceToManyRelationshipDescriptor):
                raise TypeError(f"{name} is a to-many relationship")
            self.relationships[name] = value
        elif isinstance(value, collections.abc.Iterable) and not isinstance(value, str):
            if isinstance(member, ResourceToOneRelationshipDescriptor):
                raise TypeError(f"{name} is a to-one relationship")
            values = list(value)
            for item in values:
                if not isinstance(item, Resource):
                    raise TypeError(f"{name} can only refer to resources, got {item!r}")
            self.relationships[name] = values
        else:
            raise TypeError(f"{name} can only refer to resources, got {value!r}")

    def unset_related(self, name: str) -> None:
        self.relationships.pop(name, None)

    def __repr__(self) -> str:
        if self.id is None:
            return f"<{type(self).__name__} {self.resource_type} (unsaved)>"
        suffix = " placeholder" if self.placeholder else ""
        return f"<{type(self).__name__} {self.resource_type}/{self.id}{suffix}>"

    def __init__(
        self,
        id: typing.Optional[str] = None,
        href: typing.Optional[str] = None,
        **values: typing.Any,
    ):
        descr = self.descriptor()
        self.id = id
        self.href = href
        self.attributes = OrderedDict()
        self.relationships = OrderedDict()
        for name, value in values.items():
            if name in descr.relationships:
                self.set_related(name, value)
            else:
                self.attributes[name] = value
