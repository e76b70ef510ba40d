import typing

T = typing.TypeVar("T")


class Deferred(typing.Generic[T]):
    """
    A deferred object encapsulates a lazily evaluated value, such as the result
    of a relation that has not been fetched yet.
    It takes a function that yields the value for its constructor argument, and
    it behaves as a callable by which it resolves to the yielded value.
    The yielder is invoked at most once; if it raises, the next call retries.

    :param Callable[..., T] yielder: a callable that resolves the value.
    :param args: positional arguments for the yielder.
    :param kwargs: keyword arguments for the yielder.
    """

    _yielder: typing.Optional[typing.Callable[..., T]] = None
    _value_yielded: bool = False
    _value: typing.Optional[T] = None
    _args: typing.Sequence[typing.Any]
    _kwargs: typing.Mapping[str, typing.Any]

    @property
    def resolved(self) -> bool:
        """
        :py:const:`True` once the value has been yielded.
        """
        return self._value_yielded

    def __call__(self) -> T:
        if not self._value_yielded:
            assert self._yielder is not None
            self._value = self._yielder(*self._args, **self._kwargs)
            self._value_yielded = True
        return typing.cast(T, self._value)

    def __repr__(self) -> str:
        if self._value_yielded:
            return f"<{type(self).__name__} resolved={self._value!r}>"
        return f"<{type(self).__name__} pending>"

    def __init__(self, yielder: typing.Callable[..., T], *args, **kwargs) -> None:
        self._yielder = yielder
        self._args = args
        self._kwargs = kwargs


class Promise(Deferred[T]):
    """
    A :py:class:`Promise` is a special case of :py:class:`Deferred`, in that
    you can inject the resolved value directly into the object by calling :py:meth:`set`.
    Relations filled from a response payload are stored this way.
    """

    def _yield_value(self) -> T:
        raise RuntimeError("value is not set")

    def set(self, value: T) -> "Promise[T]":
        self._value = value
        self._value_yielded = True
        return self

    def __init__(self):
        super().__init__(self._yield_value)
