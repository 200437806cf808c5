import logging
import typing

from .exceptions import InvalidDeclarationError, Source, UnknownResourceTypeError
from .models import ResourceDescriptor
from .resource import Resource

logger = logging.getLogger(__name__)


class TypeRegistry:
    """
    Maps wire type names to the resource classes that build instances of them.

    Registering a second class under a name that is already taken replaces the
    first one; the two are never merged.
    """

    classes: typing.Dict[str, typing.Type[Resource]]

    def register(self, resource_class: typing.Type[Resource]) -> typing.Type[Resource]:
        if not (isinstance(resource_class, type) and issubclass(resource_class, Resource)):
            raise InvalidDeclarationError(f"{resource_class!r} is not a resource class")
        descr = resource_class.descriptor()
        name = descr.name
        for member in descr.relationships.values():
            if member.destination is None:
                logger.warning(
                    "relationship %s of %r declares no target type; documents written for it "
                    "cannot be read back",
                    member.name,
                    name,
                )
        previous = self.classes.get(name)
        if previous is not None and previous is not resource_class:
            logger.debug(
                "type %r was registered for %s, now for %s",
                name,
                previous.__qualname__,
                resource_class.__qualname__,
            )
        self.classes[name] = resource_class
        return resource_class

    def factory_for(
        self, name: str, source: typing.Optional[Source] = None
    ) -> typing.Type[Resource]:
        try:
            return self.classes[name]
        except KeyError:
            raise UnknownResourceTypeError(name, self.classes.keys(), source)

    def descriptor_for(self, name: str) -> ResourceDescriptor:
        return self.factory_for(name).descriptor()

    def __contains__(self, name: str) -> bool:
        return name in self.classes

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self.classes)

    def __init__(self, resource_classes: typing.Iterable[typing.Type[Resource]] = ()):
        self.classes = {}
        for resource_class in resource_classes:
            self.register(resource_class)
