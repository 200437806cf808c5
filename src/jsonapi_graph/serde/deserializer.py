"""
:py:mod:`jsonapi_graph.serde.deserializer` turns a decoded wire document into
a graph of resource instances held in a :py:class:`ResourceStore`.

The work is done in two passes:

1. *build*: every representation in the document is turned into a resource
   instance, or merged into the instance the store already holds for its
   ``(type, id)``. Relationships are only recorded as :py:class:`ToOneRef` /
   :py:class:`ToManyRef` descriptors at this point, since their targets may
   appear later in the document. The descriptors are kept in the run context;
   no relationship slot is touched during this pass.
2. *resolve*: every recorded descriptor is turned into the resource it refers to,
   and only once all of them are resolved are the slots written.
   A target the store does not hold is stood in for by a placeholder, which
   carries only its type and id and is not added to the store.

A run that fails therefore leaves every relationship slot as it was.

Synopsis
--------

.. code-block:: python

   registry = TypeRegistry([Article, Person])
   store = Deserializer(registry)(
       {
           "articles": [
               {"id": "1", "title": "Hi", "links": {"author": {"id": "9"}}},
           ],
       },
   )
   store.find("articles", "1").related("author")  # -> <Person people/9 placeholder>

"""

import collections.abc
import logging
import typing
from collections import OrderedDict

from ..exceptions import MalformedDocumentError, Source
from ..models import (
    RelationshipRef,
    RelationshipSlot,
    ResourceAttributeDescriptor,
    ResourceDescriptor,
    ResourceRelationshipDescriptor,
    ResourceToManyRelationshipDescriptor,
    ResourceToOneRelationshipDescriptor,
    ToManyRef,
    ToOneRef,
)
from ..registry import TypeRegistry
from ..resource import Resource
from ..store import ResourceStore
from .formatter import ValueFormatter
from .types import JSONValue
from .utils import JSONPointer

logger = logging.getLogger(__name__)

LINKED = "linked"

PendingRelationship = typing.Tuple[Resource, str, typing.Optional[RelationshipRef]]


def _is_array(value: JSONValue) -> bool:
    return isinstance(value, collections.abc.Sequence) and not isinstance(value, (str, bytes))


def _json_type_name(value: JSONValue) -> str:
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, (int, float)):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, collections.abc.Mapping):
        return "object"
    elif _is_array(value):
        return "array"
    return type(value).__name__


def _optional_string(pointer: JSONPointer, payload: typing.Mapping, key: str) -> typing.Optional[str]:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise MalformedDocumentError(
            f"{key} must be a string, got {_json_type_name(value)}", pointer / key
        )
    return value


class DeserializationContext:
    """
    The state of a single deserialization run.
    """

    store: ResourceStore
    formatter: ValueFormatter
    pending: "OrderedDict[typing.Tuple[int, str], PendingRelationship]"
    """
    Relationship descriptors read during the build pass, keyed by resource
    identity and relationship name so a later occurrence of the same
    representation replaces the earlier entry. ``None`` clears the slot.
    """
    representations: int = 0
    created: int = 0
    placeholders: int = 0

    def relationship_recorded(
        self, resource: Resource, name: str, ref: typing.Optional[RelationshipRef]
    ) -> None:
        self.pending[(id(resource), name)] = (resource, name, ref)

    def __init__(self, store: ResourceStore, formatter: ValueFormatter):
        self.store = store
        self.formatter = formatter
        self.pending = OrderedDict()


class Deserializer:
    """
    Deserializes wire documents into resource graphs.

    A :py:class:`Deserializer` can be called any number of times; each call is
    an independent run with its own :py:class:`DeserializationContext`.

    :param TypeRegistry registry: the registry that knows the resource classes.
    :param Optional[ValueFormatter] formatter: the formatter for attribute values.
        A new :py:class:`ValueFormatter` is created for every run if omitted.
    """

    _registry: TypeRegistry
    _formatter: typing.Optional[ValueFormatter]

    def _build(self, ctx: DeserializationContext, document: JSONValue) -> None:
        pointer = JSONPointer()
        if not isinstance(document, collections.abc.Mapping):
            raise MalformedDocumentError(
                f"document must be an object, got {_json_type_name(document)}", pointer
            )
        for key, value in document.items():
            if key == LINKED:
                linked_pointer = pointer / LINKED
                if not isinstance(value, collections.abc.Mapping):
                    raise MalformedDocumentError(
                        f"{LINKED} must be an object, got {_json_type_name(value)}",
                        linked_pointer,
                    )
                for type_name, representations in value.items():
                    if not _is_array(representations):
                        raise MalformedDocumentError(
                            f"linked {type_name} must be an array, got {_json_type_name(representations)}",
                            linked_pointer / type_name,
                        )
                    self._build_collection(
                        ctx, linked_pointer / type_name, type_name, representations
                    )
            elif _is_array(value):
                self._build_collection(ctx, pointer / key, key, value)

    def _build_collection(
        self,
        ctx: DeserializationContext,
        pointer: JSONPointer,
        type_name: str,
        representations: typing.Sequence[JSONValue],
    ) -> None:
        resource_class = self._registry.factory_for(type_name, pointer)
        for i, representation in enumerate(representations):
            self._build_resource(ctx, pointer[i], resource_class, representation)

    def _build_resource(
        self,
        ctx: DeserializationContext,
        pointer: JSONPointer,
        resource_class: typing.Type[Resource],
        representation: JSONValue,
    ) -> None:
        if not isinstance(representation, collections.abc.Mapping):
            raise MalformedDocumentError(
                f"representation must be an object, got {_json_type_name(representation)}",
                pointer,
            )
        id_ = representation.get("id")
        if not isinstance(id_, str):
            raise MalformedDocumentError(
                f"representation must have a string id, got {_json_type_name(id_)}",
                pointer / "id",
            )

        descr = resource_class.descriptor()
        ctx.representations += 1
        resource = ctx.store.get(descr.name, id_)
        is_new = resource is None
        if resource is None:
            resource = resource_class()

        for key, value in representation.items():
            if key == "links":
                self._build_links(ctx, pointer / key, resource, descr, value)
            elif key == "id":
                resource.id = id_
            elif key == "href":
                resource.href = _optional_string(pointer, representation, key)
            else:
                member = descr.members.get(key)
                if isinstance(member, ResourceAttributeDescriptor):
                    member.store_value(resource, ctx.formatter.unformat(member.kind, value))
                else:
                    resource.attributes[key] = value

        if is_new:
            ctx.store.add(resource)
            ctx.created += 1

    def _build_links(
        self,
        ctx: DeserializationContext,
        pointer: JSONPointer,
        resource: Resource,
        descr: ResourceDescriptor,
        links: JSONValue,
    ) -> None:
        if not isinstance(links, collections.abc.Mapping):
            raise MalformedDocumentError(
                f"links must be an object, got {_json_type_name(links)}", pointer
            )
        for name, payload in links.items():
            self._build_link(ctx, pointer / name, resource, descr.relationships.get(name), name, payload)

    def _build_link(
        self,
        ctx: DeserializationContext,
        pointer: JSONPointer,
        resource: Resource,
        member: typing.Optional[ResourceRelationshipDescriptor],
        name: str,
        payload: JSONValue,
    ) -> None:
        href: typing.Optional[str] = None
        type_name: typing.Optional[str] = None
        target: JSONValue

        if isinstance(payload, collections.abc.Mapping):
            href = _optional_string(pointer, payload, "href")
            type_name = _optional_string(pointer, payload, "type")
            if "id" in payload:
                target = payload["id"]
                pointer = pointer / "id"
                if target is not None and not isinstance(target, str):
                    raise MalformedDocumentError(
                        f"id must be a string, got {_json_type_name(target)}", pointer
                    )
            elif "ids" in payload:
                target = payload["ids"]
                pointer = pointer / "ids"
                if not _is_array(target):
                    raise MalformedDocumentError(
                        f"ids must be an array, got {_json_type_name(target)}", pointer
                    )
            else:
                raise MalformedDocumentError("relationship has neither id nor ids", pointer)
        elif payload is None or isinstance(payload, str) or _is_array(payload):
            target = payload
        else:
            raise MalformedDocumentError(
                f"relationship must be an object, a string, an array or null, got {_json_type_name(payload)}",
                pointer,
            )

        if target is None:
            ctx.relationship_recorded(resource, name, None)
            return

        if type_name is None and member is not None:
            type_name = member.destination
        if type_name is None:
            raise MalformedDocumentError(
                f"the type of the resources relationship {name} refers to is unknown", pointer
            )

        ref: RelationshipRef
        if isinstance(target, str):
            if isinstance(member, ResourceToManyRelationshipDescriptor):
                raise MalformedDocumentError(f"{name} is a to-many relationship", pointer)
            ref = ToOneRef(target_type=type_name, target_id=target, href=href, _source_=pointer)
        else:
            ids = tuple(typing.cast(typing.Sequence[JSONValue], target))
            for i, id_ in enumerate(ids):
                if not isinstance(id_, str):
                    raise MalformedDocumentError(
                        f"id must be a string, got {_json_type_name(id_)}", pointer[i]
                    )
            if isinstance(member, ResourceToOneRelationshipDescriptor):
                raise MalformedDocumentError(f"{name} is a to-one relationship", pointer)
            ref = ToManyRef(
                target_type=type_name,
                target_ids=typing.cast(typing.Tuple[str, ...], ids),
                href=href,
                _source_=pointer,
            )
        ctx.relationship_recorded(resource, name, ref)

    def _replace_slot(
        self,
        resource: Resource,
        member: typing.Optional[ResourceRelationshipDescriptor],
        name: str,
        value: RelationshipSlot,
    ) -> None:
        if member is None:
            if value is None:
                resource.relationships.pop(name, None)
            else:
                resource.relationships[name] = value
        elif value is None:
            member.unset(resource)
        else:
            member.replace_related(resource, value)

    def _resolve(self, ctx: DeserializationContext) -> None:
        resolved: typing.List[typing.Tuple[Resource, str, RelationshipSlot]] = []
        for resource, name, ref in ctx.pending.values():
            value: RelationshipSlot = None
            if isinstance(ref, ToOneRef):
                value = self._resolve_target(ctx, ref.target_type, ref.target_id, ref._source_)
            elif isinstance(ref, ToManyRef):
                value = [
                    self._resolve_target(ctx, ref.target_type, id_, ref._source_)
                    for id_ in ref.target_ids
                ]
            resolved.append((resource, name, value))

        # slots are written only once every target is known to resolve
        for resource, name, value in resolved:
            self._replace_slot(resource, resource.descriptor().relationships.get(name), name, value)
        ctx.pending.clear()

    def _resolve_target(
        self,
        ctx: DeserializationContext,
        type_name: str,
        id_: str,
        source: typing.Optional[Source],
    ) -> Resource:
        resource_class = self._registry.factory_for(type_name, source)
        target = ctx.store.get(type_name, id_)
        if target is None:
            target = resource_class.placeholder_for(id_)
            ctx.placeholders += 1
            logger.debug("%s: %s/%s is not in the store, using a placeholder", source, type_name, id_)
        return target

    def __call__(
        self, document: JSONValue, store: typing.Optional[ResourceStore] = None
    ) -> ResourceStore:
        """
        Deserializes ``document`` into ``store``.

        :param JSONValue document: the decoded wire document.
        :param Optional[ResourceStore] store: the store to merge into; a new one if omitted.
        :return: the store, with every relationship of the document resolved.
        """
        ctx = DeserializationContext(
            store=store if store is not None else ResourceStore(),
            formatter=self._formatter if self._formatter is not None else ValueFormatter(),
        )
        self._build(ctx, document)
        relationships = len(ctx.pending)
        self._resolve(ctx)
        logger.debug(
            "deserialized %d representations (%d new), resolved %d relationships with %d placeholders",
            ctx.representations,
            ctx.created,
            relationships,
            ctx.placeholders,
        )
        return ctx.store

    def __init__(self, registry: TypeRegistry, formatter: typing.Optional[ValueFormatter] = None):
        self._registry = registry
        self._formatter = formatter
