import collections.abc
import typing

from .collection import Collection
from .exceptions import ModelError
from .types import JSONObject, JSONValue


class Factory:
    """
    Turns a decoded payload into models.

    A JSON object that carries the primary key (or any object for a singleton
    resource) denotes one resource; a JSON array denotes a list of resources.
    """

    model: "Model"

    def make(self, data: JSONValue) -> typing.Union["Model", Collection["Model"]]:
        if isinstance(data, collections.abc.Mapping):
            if self.model.get_key_name() in data or self.model.is_singleton():
                return self.instance(data)
            raise ModelError(
                self.model,
                f'unexpected payload for "{self.model.get_name()}": '
                f'an object without "{self.model.get_key_name()}"',
            )
        if isinstance(data, collections.abc.Sequence) and not isinstance(data, (str, bytes)):
            return self.collection(self.instance(item) for item in data)
        raise ModelError(
            self.model,
            f'unexpected payload for "{self.model.get_name()}": {type(data).__name__}',
        )

    def instance(self, attributes: JSONObject) -> "Model":
        return self.model.new_instance(attributes)

    def collection(self, items: typing.Iterable["Model"]) -> Collection["Model"]:
        return Collection(items)

    def __init__(self, model: "Model"):
        self.model = model


if typing.TYPE_CHECKING:
    from .models import Model  # noqa: E402
