import logging

from .declarative import Date, Property, ToMany, ToOne  # noqa: F401
from .exceptions import (  # noqa: F401
    IdentityConflictError,
    InvalidAttributeValueError,
    InvalidDeclarationError,
    JSONAPIGraphError,
    JSONAPIGraphException,
    MalformedDocumentError,
    UnknownResourceTypeError,
    UnsavedRelatedResourceError,
)
from .mapper import ResourceMapper  # noqa: F401
from .models import AttributeKind, ToManyRef, ToOneRef  # noqa: F401
from .registry import TypeRegistry  # noqa: F401
from .resource import Resource  # noqa: F401
from .serde.deserializer import Deserializer  # noqa: F401
from .serde.formatter import ValueFormatter  # noqa: F401
from .serde.serializer import Serializer  # noqa: F401
from .store import ResourceStore  # noqa: F401

logging.getLogger(__name__).addHandler(logging.NullHandler())
