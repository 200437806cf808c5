import typing
from collections import OrderedDict

from .exceptions import IdentityConflictError
from .resource import Resource

Key = typing.Tuple[str, str]


class ResourceStore:
    """
    An identity map of resources keyed by ``(resource_type, id)``.

    Within one store, a key maps to at most one instance, and looking a key up
    yields that same instance every time. A store is not thread-safe; runs that
    share a store must not overlap.
    """

    _resources: "OrderedDict[Key, Resource]"

    @staticmethod
    def key_for(resource: Resource) -> Key:
        if resource.id is None:
            raise ValueError(f"{resource!r} has no id and cannot be keyed")
        return (resource.resource_type, resource.id)

    def add(self, resource: Resource) -> None:
        key = self.key_for(resource)
        existing = self._resources.get(key)
        if existing is not None:
            if existing is resource:
                return
            raise IdentityConflictError(*key)
        self._resources[key] = resource

    def remove(self, resource: Resource) -> None:
        key = self.key_for(resource)
        if self._resources.get(key) is not resource:
            raise KeyError(key)
        del self._resources[key]

    def get(self, resource_type: str, id: str) -> typing.Optional[Resource]:
        return self._resources.get((resource_type, id))

    def find(self, resource_type: str, id: str) -> Resource:
        return self._resources[(resource_type, id)]

    def resources_of_type(self, resource_type: str) -> typing.List[Resource]:
        return [r for (t, _), r in self._resources.items() if t == resource_type]

    def __contains__(self, item: typing.Union[Key, Resource]) -> bool:
        if isinstance(item, Resource):
            return item.id is not None and self._resources.get(self.key_for(item)) is item
        return item in self._resources

    def __iter__(self) -> typing.Iterator[Resource]:
        return iter(list(self._resources.values()))

    def __len__(self) -> int:
        return len(self._resources)

    def __repr__(self) -> str:
        return f"ResourceStore({list(self._resources.values())!r})"

    def __init__(self, resources: typing.Iterable[Resource] = ()):
        self._resources = OrderedDict()
        for resource in resources:
            self.add(resource)
