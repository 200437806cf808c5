import typing


def _escape(component: str) -> str:
    return component.replace("~", "~0").replace("/", "~1")


def _unescape(component: str) -> str:
    return component.replace("~1", "/").replace("~0", "~")


class JSONPointer:
    """
    An immutable `JSON Pointer <https://tools.ietf.org/html/rfc6901>`_ used to tell
    where in a wire document something went wrong.

    ``JSONPointer()`` and ``JSONPointer("/")`` both denote the document root.
    A new pointer is derived with ``/`` for object members and ``[]`` for array items:

    .. code-block:: python

       (JSONPointer() / "articles")[0] / "links"  # -> /articles/0/links
    """

    components: typing.Tuple[str, ...]

    def __truediv__(self, component: str) -> "JSONPointer":
        return JSONPointer(self.components + (component,))

    def __getitem__(self, index: int) -> "JSONPointer":
        return JSONPointer(self.components + (str(index),))

    @property
    def parent(self) -> typing.Optional["JSONPointer"]:
        if not self.components:
            return None
        return JSONPointer(self.components[:-1])

    def __str__(self) -> str:
        return "/" + "/".join(_escape(c) for c in self.components)

    def __repr__(self) -> str:
        return f"JSONPointer({str(self)!r})"

    def __eq__(self, that: typing.Any) -> bool:
        if not isinstance(that, JSONPointer):
            return NotImplemented
        return self.components == that.components

    def __hash__(self) -> int:
        return hash(self.components)

    def __init__(self, path: typing.Union[str, typing.Iterable[str], None] = None):
        if path is None:
            self.components = ()
        elif isinstance(path, str):
            if path in ("", "/"):
                self.components = ()
            elif not path.startswith("/"):
                raise ValueError(f"invalid JSON pointer: {path!r}")
            else:
                self.components = tuple(_unescape(c) for c in path[1:].split("/"))
        else:
            self.components = tuple(path)
