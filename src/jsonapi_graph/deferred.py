import typing

T = typing.TypeVar("T")


class Deferred(typing.Generic[T]):
    """
    A deferred object encapsulates a lazily evaluated value.
    Relationship declarations use it to refer to a resource class whose
    descriptor may not be buildable yet, e.g. a class declared further down
    in the same module.

    :param Callable[..., T] yielder: a callable that resolves the value.
    :param args: positional arguments for the yielder.
    """

    _yielder: typing.Callable[..., T]
    _args: typing.Sequence[typing.Any]
    _value_yielded: bool = False
    _value: typing.Optional[T] = None

    def __call__(self) -> T:
        if not self._value_yielded:
            self._value = self._yielder(*self._args)
            self._value_yielded = True
        return typing.cast(T, self._value)

    def __repr__(self) -> str:
        if self._value_yielded:
            return f"Deferred({self._value!r})"
        return "Deferred(<unresolved>)"

    def __init__(self, yielder: typing.Callable[..., T], *args: typing.Any) -> None:
        self._yielder = yielder
        self._args = args
