"""
:py:mod:`jsonapi_graph.serde.serializer` renders resource instances into the
wire representation sent with write requests.

Synopsis
--------

.. code-block:: python

   import json

   from jsonapi_graph.serde.serializer import Serializer

   serializer = Serializer()

   author = Person(id="9", name="Jane")
   article = Article(id="1", title="Hi", author=author)

   print(json.dumps(serializer([article, author])))
   # {"articles": [{"id": "1", "title": "Hi", "links": {"author": "9", "comments": []}}],
   #  "people": [{"id": "9", "name": "Jane"}]}

"""

import collections.abc
import logging
import typing
from collections import OrderedDict

from ..exceptions import InvalidAttributeValueError, UnsavedRelatedResourceError
from ..models import (
    AttributeKind,
    Missing,
    ResourceAttributeDescriptor,
    ResourceRelationshipDescriptor,
)
from ..resource import Resource
from .formatter import ValueFormatter
from .types import MutableJSONObject, WireDocument
from .utils import JSONPointer

logger = logging.getLogger(__name__)


class SerializerContext:
    path: JSONPointer

    def __truediv__(self, component: str) -> "SerializerContext":
        return SerializerContext(self.path / component)

    def __getitem__(self, index: int) -> "SerializerContext":
        return SerializerContext(self.path[index])

    def __init__(self, path: typing.Optional[JSONPointer] = None):
        self.path = JSONPointer() if path is None else path


class Serializer:
    """
    Serializes resources into a mapping of type names to representations.

    Only declared attributes and relationships are emitted, in declaration order.
    Relationships are read from the relationship slots of each resource.

    :param Optional[ValueFormatter] formatter: the formatter for attribute values.
        A new :py:class:`ValueFormatter` is created for every run if omitted.
    """

    _formatter: typing.Optional[ValueFormatter]

    def _dict_factory(self, items: typing.Iterable[typing.Tuple[str, typing.Any]] = ()):
        return OrderedDict(items)

    def _render_attribute(
        self,
        ctx: SerializerContext,
        formatter: ValueFormatter,
        resource: Resource,
        member: ResourceAttributeDescriptor,
    ) -> typing.Any:
        value = member.fetch_value(resource)
        try:
            return formatter.format(member.kind, value)
        except ValueError as e:
            raise InvalidAttributeValueError(
                resource, member.name, value, detail=str(e), source=ctx.path
            ) from e

    def _render_to_one(
        self, ctx: SerializerContext, resource: Resource, member: ResourceRelationshipDescriptor
    ) -> typing.Any:
        related = member.fetch_related(resource)
        if related is Missing or related is None:
            return None
        if not isinstance(related, Resource):
            raise TypeError(f"{ctx.path}: unsupported relationship value {related!r}")
        return related.id if related.id is not None else Missing

    def _render_to_many(
        self, ctx: SerializerContext, resource: Resource, member: ResourceRelationshipDescriptor
    ) -> typing.List[str]:
        related = member.fetch_related(resource)
        if related is Missing or related is None:
            return []
        if not isinstance(related, collections.abc.Sequence) or isinstance(related, str):
            raise TypeError(f"{ctx.path}: unsupported relationship value {related!r}")
        ids: typing.List[str] = []
        for i, item in enumerate(related):
            if not isinstance(item, Resource):
                raise TypeError(f"{ctx[i].path}: unsupported relationship value {item!r}")
            if item.id is None:
                raise UnsavedRelatedResourceError(resource, member.name, item, source=ctx[i].path)
            ids.append(item.id)
        return ids

    def _render_resource(
        self, ctx: SerializerContext, formatter: ValueFormatter, resource: Resource
    ) -> MutableJSONObject:
        retval: MutableJSONObject = self._dict_factory()
        links: MutableJSONObject = self._dict_factory()

        if resource.id is not None:
            retval["id"] = resource.id

        for name, member in resource.descriptor().members.items():
            if member.kind is AttributeKind.TO_ONE:
                value = self._render_to_one(
                    ctx / "links" / name, resource, typing.cast(ResourceRelationshipDescriptor, member)
                )
                if value is not Missing:
                    links[name] = value
            elif member.kind is AttributeKind.TO_MANY:
                links[name] = self._render_to_many(
                    ctx / "links" / name, resource, typing.cast(ResourceRelationshipDescriptor, member)
                )
            elif name in resource.attributes:
                retval[name] = self._render_attribute(
                    ctx / name, formatter, resource, typing.cast(ResourceAttributeDescriptor, member)
                )

        if links:
            retval["links"] = links
        return retval

    def __call__(self, resources: typing.Iterable[Resource]) -> WireDocument:
        """
        Serializes ``resources``, grouped by their type in the order they are given.

        :param Iterable[Resource] resources: the resources to serialize.
        :return: a mapping of type names to lists of representations.
        """
        formatter = self._formatter if self._formatter is not None else ValueFormatter()
        ctx = SerializerContext()
        retval: WireDocument = self._dict_factory()
        for resource in resources:
            group = retval.setdefault(resource.resource_type, [])
            group.append(
                self._render_resource(
                    (ctx / resource.resource_type)[len(group)], formatter, resource
                )
            )
        logger.debug(
            "serialized %s",
            ", ".join(f"{len(group)} {type_name}" for type_name, group in retval.items()),
        )
        return retval

    def __init__(self, formatter: typing.Optional[ValueFormatter] = None):
        self._formatter = formatter
