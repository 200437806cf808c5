import json
import typing

from .exceptions import MalformedDocumentError
from .registry import TypeRegistry
from .resource import Resource
from .serde.deserializer import Deserializer
from .serde.formatter import ValueFormatter
from .serde.serializer import Serializer
from .serde.types import JSONValue, WireDocument
from .serde.utils import JSONPointer
from .store import ResourceStore


class ResourceMapper:
    """
    The entry point that ties the type registry to the deserializer and the serializer.

    The transport layer hands over the documents it received and sends out the
    representations it gets back; the mapper does no I/O by itself.

    :param Optional[TypeRegistry] registry: the registry to use; a new one if omitted.
    :param Callable[[], ValueFormatter] formatter_factory: builds the formatter
        for each run.
    """

    registry: TypeRegistry
    formatter_factory: typing.Callable[[], ValueFormatter]

    def register(self, *resource_classes: typing.Type[Resource]) -> None:
        for resource_class in resource_classes:
            self.registry.register(resource_class)

    def deserialize(
        self, document: JSONValue, store: typing.Optional[ResourceStore] = None
    ) -> ResourceStore:
        """
        Deserializes a decoded document.

        :param JSONValue document: the decoded wire document.
        :param Optional[ResourceStore] store: a store to merge the resources into.
        :return: the store holding the resources of the document.
        """
        return Deserializer(self.registry, self.formatter_factory())(document, store)

    def serialize(self, resources: typing.Iterable[Resource]) -> WireDocument:
        """
        Serializes resources for a write request.

        :param Iterable[Resource] resources: the resources to serialize.
        :return: a mapping of type names to lists of representations.
        """
        return Serializer(self.formatter_factory())(resources)

    def loads(
        self, text: typing.Union[str, bytes], store: typing.Optional[ResourceStore] = None
    ) -> ResourceStore:
        try:
            document = json.loads(text)
        except ValueError as e:
            raise MalformedDocumentError(f"invalid JSON ({e})", JSONPointer()) from e
        return self.deserialize(document, store)

    def dumps(self, resources: typing.Iterable[Resource], **kwargs: typing.Any) -> str:
        return json.dumps(self.serialize(resources), **kwargs)

    def __init__(
        self,
        registry: typing.Optional[TypeRegistry] = None,
        formatter_factory: typing.Callable[[], ValueFormatter] = ValueFormatter,
    ):
        self.registry = registry if registry is not None else TypeRegistry()
        self.formatter_factory = formatter_factory
