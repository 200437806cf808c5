"""
Classes in :py:mod:`jsonapi_graph.models` describe the shape of a resource class:
which attributes it has, of which kind, and where its relationships point to.
They also define the transient relationship descriptors the deserializer records
before every relationship target is known.
"""

import dataclasses
import enum
import typing
from collections import OrderedDict

from .deferred import Deferred
from .exceptions import Source
from .utils import assert_not_none


class AttributeKind(enum.Enum):
    PROPERTY = "property"
    DATE = "date"
    TO_ONE = "to_one"
    TO_MANY = "to_many"


class MissingType:
    def __bool__(self):
        return False

    def __repr__(self):
        return "Missing"

    def __init__(self):
        raise TypeError("Not directly instantiable")


Missing = object.__new__(MissingType)
"""
Returned by the accessors when an attribute or a relationship is unset,
which is not the same thing as being set to ``None``.
"""


@dataclasses.dataclass(frozen=True)
class ToOneRef:
    """
    A to-one relationship as read from ``links``, before its target is resolved.
    """

    target_type: str
    target_id: str
    href: typing.Optional[str] = None
    _source_: typing.Optional[Source] = dataclasses.field(default=None, compare=False)


@dataclasses.dataclass(frozen=True)
class ToManyRef:
    """
    A to-many relationship as read from ``links``, before its targets are resolved.
    ``target_ids`` keeps the order of the wire payload.
    """

    target_type: str
    target_ids: typing.Tuple[str, ...]
    href: typing.Optional[str] = None
    _source_: typing.Optional[Source] = dataclasses.field(default=None, compare=False)


RelationshipRef = typing.Union[ToOneRef, ToManyRef]

RelationshipSlot = typing.Union[
    RelationshipRef,
    "resource.Resource",
    typing.List["resource.Resource"],
    None,
]


class ResourceMemberDescriptor:
    parent: typing.Optional["ResourceDescriptor"] = None
    name: str
    kind: AttributeKind

    T = typing.TypeVar("T", bound="ResourceMemberDescriptor")

    def bind(self: T, parent: "ResourceDescriptor") -> T:
        self.parent = parent
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class ResourceAttributeDescriptor(ResourceMemberDescriptor):
    """
    Describes a ``Property`` or ``Date`` attribute and gives access to its value
    on a resource instance.
    """

    def fetch_value(self, target: "resource.Resource") -> typing.Any:
        return target.attributes.get(self.name, Missing)

    def store_value(self, target: "resource.Resource", value: typing.Any) -> None:
        target.attributes[self.name] = value

    def unset(self, target: "resource.Resource") -> None:
        target.attributes.pop(self.name, None)

    def __init__(self, name: str, kind: AttributeKind = AttributeKind.PROPERTY):
        if kind not in (AttributeKind.PROPERTY, AttributeKind.DATE):
            raise ValueError(f"{kind} is not an attribute kind")
        self.name = name
        self.kind = kind


class ResourceRelationshipDescriptor(ResourceMemberDescriptor):
    _destination: typing.Union[None, str, Deferred[str]]

    @property
    def destination(self) -> typing.Optional[str]:
        """
        The type name of the resources on the other side, or ``None`` when the
        wire payload is expected to tell.
        """
        if isinstance(self._destination, Deferred):
            return self._destination()
        else:
            return self._destination

    def fetch_related(self, target: "resource.Resource") -> typing.Any:
        return target.relationships.get(self.name, Missing)

    def replace_related(self, target: "resource.Resource", value: RelationshipSlot) -> None:
        target.relationships[self.name] = value

    def unset(self, target: "resource.Resource") -> None:
        target.relationships.pop(self.name, None)

    def __init__(
        self,
        name: str,
        destination: typing.Union[None, str, Deferred[str]] = None,
    ):
        self.name = name
        self._destination = destination


class ResourceToOneRelationshipDescriptor(ResourceRelationshipDescriptor):
    kind = AttributeKind.TO_ONE


class ResourceToManyRelationshipDescriptor(ResourceRelationshipDescriptor):
    kind = AttributeKind.TO_MANY


class ResourceDescriptor:
    """
    A :py:class:`ResourceDescriptor` holds the attribute schema of a resource class.

    :param str name: The type name of the resource, as it appears on the wire.
    :param Iterable[ResourceMemberDescriptor] members: The attribute and relationship
        descriptors, in declaration order.
    """

    name: str
    """
    The type name of the resource.
    """
    _members: typing.MutableMapping[str, ResourceMemberDescriptor]

    @property
    def members(self) -> typing.Mapping[str, ResourceMemberDescriptor]:
        """
        Every declared member in declaration order, which is also the order
        the serializer emits them in.
        """
        return self._members

    @property
    def attributes(self) -> typing.Mapping[str, ResourceAttributeDescriptor]:
        """
        The mapping of attribute names to :py:class:`ResourceAttributeDescriptor`\\ s.
        """
        return OrderedDict(
            (name, member)
            for name, member in self._members.items()
            if isinstance(member, ResourceAttributeDescriptor)
        )

    @property
    def relationships(self) -> typing.Mapping[str, ResourceRelationshipDescriptor]:
        """
        The mapping of relationship names to :py:class:`ResourceRelationshipDescriptor`\\ s.
        """
        return OrderedDict(
            (name, member)
            for name, member in self._members.items()
            if isinstance(member, ResourceRelationshipDescriptor)
        )

    def __repr__(self) -> str:
        return f"ResourceDescriptor({self.name!r}, {list(self._members.values())!r})"

    def __init__(
        self,
        name: str,
        members: typing.Iterable[ResourceMemberDescriptor] = (),
    ) -> None:
        self.name = name
        self._members = OrderedDict(
            ((assert_not_none(member.name), member.bind(self)) for member in members)
        )


if typing.TYPE_CHECKING:
    from . import resource  # noqa: E402
