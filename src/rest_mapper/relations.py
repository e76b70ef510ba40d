"""
Relations describe how a model reaches the resources it relates to:

* :py:class:`BelongsTo`: the owner holds a foreign key to the related resource.
* :py:class:`HasMany`: the related resources hold a foreign key to the owner.
* :py:class:`Nested`: the related resource lives under the owner's URL.
* :py:class:`MorphTo`: a :py:class:`BelongsTo` whose target type is picked by
  a discriminator attribute of the owner.

A relation never performs HTTP calls by itself except through the queries it
builds (:py:meth:`Relation.new_query`, :py:meth:`Relation.get_results`) and
:py:meth:`Relation.create`.
"""
import abc
import collections.abc
import typing

from .collection import Collection
from .exceptions import ModelError, UnknownMorphTypeError
from .types import JSONObject, JSONValue
from .utils import assert_not_none, camel_case

RelationResult = typing.Union["Model", Collection["Model"], None]


class Relation(metaclass=abc.ABCMeta):
    model: "Model"
    """
    The owning model.
    """

    _related: typing.Optional["Model"]

    def get_related(self) -> "Model":
        """
        Returns the template model of the other side of the relation.
        """
        return assert_not_none(self._related)

    def get_name(self) -> str:
        """
        Returns the name under which the API addresses the relation.
        """
        return camel_case(self.get_related().get_endpoint())

    @abc.abstractmethod
    def new_query(self) -> "Query":
        """
        Returns a new query that fetches the related resource(s).
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def create(self, attributes: JSONObject) -> "Model":
        """
        Creates a related resource through the API.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def fill(self, data: JSONValue) -> RelationResult:
        """
        Builds models out of already decoded data for this relation.
        """
        ...  # pragma: nocover

    @abc.abstractmethod
    def get_results(self) -> RelationResult:
        """
        Fetches the related resource(s).
        """
        ...  # pragma: nocover

    def _expect_object(self, data: JSONValue) -> JSONObject:
        if not isinstance(data, collections.abc.Mapping):
            raise ModelError(
                self.model,
                f'unexpected payload for relation "{self.get_name()}": '
                f"expected an object, got {type(data).__name__}",
            )
        return data

    def _expect_array(self, data: JSONValue) -> typing.List[JSONObject]:
        if not isinstance(data, collections.abc.Sequence) or isinstance(data, (str, bytes)):
            raise ModelError(
                self.model,
                f'unexpected payload for relation "{self.get_name()}": '
                f"expected an array, got {type(data).__name__}",
            )
        return [self._expect_object(item) for item in data]

    def __init__(self, model: "Model", related: typing.Optional["Model"]):
        self.model = model
        self._related = related


def _as_collection(result: RelationResult) -> Collection["Model"]:
    if result is None:
        return Collection()
    if isinstance(result, Collection):
        return result
    return Collection([result])


class BelongsTo(Relation):
    foreign_key: str

    def get_name(self) -> str:
        return self.get_related().get_name()

    def new_query(self) -> "Query":
        related = self.get_related()
        return related.new_query().where(
            related.get_key_name(), self.model.get_attribute(self.foreign_key)
        )

    def create(self, attributes: JSONObject) -> "Model":
        return self.get_related().create(attributes)

    def fill(self, data: JSONValue) -> "Model":
        return self.get_related().new_instance(self._expect_object(data))

    def get_results(self) -> typing.Optional["Model"]:
        if self.model.get_attribute(self.foreign_key) is None:
            return None
        return self.new_query().first()

    def __init__(
        self, model: "Model", related: "Model", foreign_key: typing.Optional[str] = None
    ):
        super().__init__(model, related)
        self.foreign_key = foreign_key or related.get_foreign_key()


class HasMany(Relation):
    foreign_key: str

    def new_query(self) -> "Query":
        return self.get_related().new_query().where(self.foreign_key, self.model.get_key())

    def create(self, attributes: JSONObject) -> "Model":
        return self.get_related().create(self.associate(attributes))

    def fill(self, data: JSONValue) -> Collection["Model"]:
        related = self.get_related()
        return Collection(
            related.new_instance(self.associate(item)) for item in self._expect_array(data)
        )

    def get_results(self) -> Collection["Model"]:
        return _as_collection(self.new_query().get())

    def associate(self, attributes: JSONObject) -> typing.Dict[str, typing.Any]:
        """
        Returns a copy of ``attributes`` pointing at the owner through the foreign key.
        """
        retval = dict(attributes)
        retval[self.foreign_key] = self.model.get_key()
        return retval

    def __init__(
        self, model: "Model", related: "Model", foreign_key: typing.Optional[str] = None
    ):
        super().__init__(model, related)
        self.foreign_key = foreign_key or model.get_foreign_key()


class Nested(Relation):
    """
    The related resource is addressed under the owner's URL, e.g.
    ``/accounts/42/users``.  The related template is a copy of the given one
    scoped by the owner's scopes and by ``(owner endpoint, owner key)``.
    """

    def new_query(self) -> "Query":
        return self.get_related().new_query()

    def create(self, attributes: JSONObject) -> "Model":
        return self.get_related().create(attributes)

    def fill(self, data: JSONValue) -> typing.Union["Model", Collection["Model"]]:
        related = self.get_related()
        if related.is_singleton():
            return related.new_instance(self._expect_object(data))
        return Collection(related.new_instance(item) for item in self._expect_array(data))

    def get_results(self) -> RelationResult:
        result = self.new_query().get()
        if self.get_related().is_singleton():
            return result
        return _as_collection(result)

    def __init__(self, model: "Model", related: "Model"):
        super().__init__(model, related.nest_under(model))


class MorphTo(BelongsTo):
    """
    :param Model model: the owning model.
    :param Sequence[Model] related: the candidate templates.
    :param str morph_key: the name under which the API addresses the relation.
    :param Optional[str] foreign_key: the owner's attribute holding the related key;
                                      defaults to ``<morph_key>_id``.
    :param Optional[str] type_key: the owner's attribute holding the type name of the
                                   related resource; defaults to ``<morph_key>_type``.
    """

    morph_key: str
    type_key: str
    candidates: typing.Sequence["Model"]

    def get_related(self) -> "Model":
        return self._match(self.model.get_attribute(self.type_key))

    def _match(self, type_name: typing.Any) -> "Model":
        for candidate in self.candidates:
            if candidate.get_type_name() == type_name:
                return candidate
        raise UnknownMorphTypeError(
            self.model,
            type_name,
            [candidate.get_type_name() for candidate in self.candidates],
        )

    def get_name(self) -> str:
        return self.morph_key

    def fill(self, data: JSONValue) -> "Model":
        """
        Builds the related model.  When the owner carries no type name, the
        ``type`` member of the related object picks the template.
        """
        data = self._expect_object(data)
        type_name = self.model.get_attribute(self.type_key)
        if not isinstance(type_name, str):
            type_name = data.get("type")
        return self._match(type_name).new_instance(data)

    def get_results(self) -> typing.Optional["Model"]:
        if self.model.get_attribute(self.type_key) is None:
            return None
        return super().get_results()

    def __init__(
        self,
        model: "Model",
        related: typing.Sequence["Model"],
        morph_key: str,
        foreign_key: typing.Optional[str] = None,
        type_key: typing.Optional[str] = None,
    ):
        Relation.__init__(self, model, None)
        self.candidates = tuple(related)
        self.morph_key = morph_key
        self.foreign_key = foreign_key or f"{morph_key}_id"
        self.type_key = type_key or f"{morph_key}_type"


if typing.TYPE_CHECKING:
    from .models import Model  # noqa: E402
    from .query import Query  # noqa: E402
