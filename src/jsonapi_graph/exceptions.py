import abc
import typing

from .serde.types import JSONValue
from .serde.utils import JSONPointer, english_enumerate

Source = typing.Union[JSONPointer, str]


class JSONAPIGraphException(Exception, metaclass=abc.ABCMeta):
    message: str

    def __str__(self):
        return self.message


class InvalidDeclarationError(JSONAPIGraphException):
    message: str

    def __init__(self, message: str):
        self.message = message


class IdentityConflictError(JSONAPIGraphException):
    resource_type: str
    id: str

    @property
    def message(self):
        return f'another instance of "{self.resource_type}" ({self.id}) is already in the store'

    def __init__(self, resource_type: str, id: str):
        self.resource_type = resource_type
        self.id = id


class JSONAPIGraphError(JSONAPIGraphException, metaclass=abc.ABCMeta):
    """
    The base of the errors that terminate a deserialization or serialization run.
    """

    _source: typing.Optional[Source] = None

    @property
    def sources(self) -> typing.Sequence[Source]:
        if self._source is None:
            return []
        else:
            return [self._source]

    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover


class MalformedDocumentError(JSONAPIGraphError):
    detail: str

    @property
    def message(self):
        if self._source is None:
            return self.detail
        return f"{self._source}: {self.detail}"

    def __init__(self, detail: str, source: typing.Optional[Source] = None):
        self.detail = detail
        self._source = source


class UnknownResourceTypeError(JSONAPIGraphError):
    name: str
    known: typing.Sequence[str]

    @property
    def message(self):
        msg = f'no resource known as "{self.name}"'
        if self.known:
            known = english_enumerate(self.known, quote='"')
            msg += f" (known types are {known})"
        return msg

    def __init__(
        self,
        name: str,
        known: typing.Iterable[str] = (),
        source: typing.Optional[Source] = None,
    ):
        self.name = name
        self.known = sorted(known)
        self._source = source


class UnsavedRelatedResourceError(JSONAPIGraphError):
    resource: "Resource"
    name: str
    related: "Resource"

    @property
    def message(self):
        return (
            f'relationship ({self.name}) of "{self.resource.resource_type}" refers to '
            f'an unsaved "{self.related.resource_type}"; save it before its parent'
        )

    def __init__(
        self,
        resource: "Resource",
        name: str,
        related: "Resource",
        source: typing.Optional[Source] = None,
    ):
        self.resource = resource
        self.name = name
        self.related = related
        self._source = source


class InvalidAttributeValueError(JSONAPIGraphError):
    resource: "Resource"
    name: str
    actual: JSONValue
    detail: typing.Optional[str]

    @property
    def message(self):
        return f'attribute ({self.name}) in "{self.resource.resource_type}" contains an invalid value{" (" + self.detail + ")" if self.detail is not None else ""}: {self.actual!r}'

    def __init__(
        self,
        resource: "Resource",
        name: str,
        actual: typing.Any,
        detail: typing.Optional[str] = None,
        source: typing.Optional[Source] = None,
    ):
        self.resource = resource
        self.name = name
        self.actual = actual
        self.detail = detail
        self._source = source


if typing.TYPE_CHECKING:
    from .resource import Resource  # noqa: E402
