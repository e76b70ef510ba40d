import collections.abc
import typing

M = typing.TypeVar("M", bound="models.Model")


class Collection(collections.abc.Sequence, typing.Generic[M]):
    """
    An ordered sequence of models as returned by a listing endpoint or a
    to-many relation.  No uniqueness is enforced beyond what the API guarantees.

    :param Iterable[Model] items: the initial items.
    """

    _items: typing.List[M]

    def fill(self, items: typing.Iterable[M]) -> "Collection[M]":
        self._items.extend(items)
        return self

    def append(self, item: M) -> None:
        self._items.append(item)

    def find(self, id: typing.Any) -> typing.Optional[M]:
        """
        Looks an item up by its primary key value.
        Keys are compared by value first, then by their string representation
        so that ``find("2")`` matches a model whose key is ``2``.

        :param Any id: the primary key value.
        :return: The first matching model, or :py:const:`None`.
        """
        for item in self._items:
            key = item.get_key()
            if key == id or (key is not None and id is not None and str(key) == str(id)):
                return item
        return None

    def first(self) -> typing.Optional[M]:
        return self._items[0] if self._items else None

    def keys(self) -> typing.List[typing.Any]:
        return [item.get_key() for item in self._items]

    def to_list(self) -> typing.List[typing.Dict[str, typing.Any]]:
        return [item.to_dict() for item in self._items]

    @typing.overload
    def __getitem__(self, index: int) -> M:
        ...  # pragma: nocover

    @typing.overload
    def __getitem__(self, index: slice) -> "Collection[M]":
        ...  # pragma: nocover

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Collection(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> typing.Iterator[M]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"

    def __init__(self, items: typing.Iterable[M] = ()):
        self._items = list(items)


if typing.TYPE_CHECKING:
    from . import models  # noqa: E402
