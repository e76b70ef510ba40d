import collections.abc
import json
import logging
import typing

from .collection import Collection
from .config import get_settings
from .defaults import get_default_transport
from .deferred import Deferred, Promise
from .exceptions import InvalidDeclarationError, ModelError, RelationNotFoundError
from .interfaces import AccessToken, Transport
from .query import Query, QueryResult
from .relations import BelongsTo, HasMany, MorphTo, Nested, Relation, RelationResult
from .request import Request
from .types import JSONObject, JSONValue, MutableJSONObject
from .utils import lcfirst, ucfirst

logger = logging.getLogger(__name__)

_RELATION_MARKER = "__rest_mapper_relation__"


class Scope(typing.NamedTuple):
    """
    A pair of URL path segments placed in front of a resource's endpoint.
    """

    context: str
    key: typing.Any = None


RelationFactory = typing.Callable[["Model"], Relation]
ModelReference = typing.Union[typing.Type["Model"], "Model"]

Tm = typing.TypeVar("Tm", bound="Model")


def relation(func: RelationFactory) -> RelationFactory:
    """
    Declares a relation.  The decorated method must return a :py:class:`Relation`;
    it is registered under its own name, which is the name accepted by
    :py:meth:`Model.relation`, :py:meth:`Model.get_relation` and :py:meth:`Query.with_`.

    .. code-block:: python

       class Post(Model):
           endpoint = "posts"

           @relation
           def author(self):
               return self.belongs_to(User)
    """
    setattr(func, _RELATION_MARKER, True)
    return func


class Model:
    """
    The base class of every resource.  Subclasses declare at least ``endpoint``.

    :param AccessToken token: the credential used for every request made on behalf of the model.
    :param Optional[Mapping[str, Any]] attributes: initial attributes, see :py:meth:`fill`.
    :param Iterable[Scope] scopes: the scopes the resource lives under.
    """

    endpoint: typing.ClassVar[typing.Optional[str]] = None
    """
    The path segment of the resource, e.g. ``"users"``.
    """

    name: typing.ClassVar[typing.Optional[str]] = None
    """
    The name of the resource; defaults to the class name with its first letter lower-cased.
    """

    primary_key: typing.ClassVar[str] = "id"
    prefix: typing.ClassVar[typing.Optional[str]] = None
    singleton: typing.ClassVar[bool] = False
    """
    Set to :py:const:`True` for resources that have no collection form and no
    identifier in their URL.
    """

    partial_updates: typing.ClassVar[bool] = False
    """
    Set to :py:const:`True` to save existing resources with ``PATCH`` instead of ``PUT``.
    """

    type_name: typing.ClassVar[typing.Optional[str]] = None
    """
    The value a :py:class:`MorphTo` discriminator takes for this resource;
    defaults to the class name.
    """

    base_url: typing.ClassVar[typing.Optional[str]] = None
    transport: typing.ClassVar[typing.Optional[Transport]] = None

    _relation_factories: typing.ClassVar[typing.Dict[str, RelationFactory]] = {}
    _relation_accessor_map: typing.ClassVar[typing.Optional[typing.Mapping[str, str]]] = None

    token: AccessToken
    scopes: typing.Tuple[Scope, ...]
    deleted: bool
    _attributes: MutableJSONObject
    _relations: typing.Dict[str, Deferred[RelationResult]]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        factories = dict(cls._relation_factories)
        for k, v in vars(cls).items():
            if callable(v) and getattr(v, _RELATION_MARKER, False) is True:
                factories[k] = v
            elif k in factories:
                del factories[k]
        cls._relation_factories = factories

    def get_name(self) -> str:
        return type(self).name or lcfirst(type(self).__name__)

    def get_endpoint(self) -> str:
        return typing.cast(str, type(self).endpoint)

    def get_prefix(self) -> typing.Optional[str]:
        return type(self).prefix

    def get_type_name(self) -> str:
        return type(self).type_name or type(self).__name__

    def get_token(self) -> AccessToken:
        return self.token

    def get_scopes(self) -> typing.Tuple[Scope, ...]:
        return self.scopes

    def get_base_url(self) -> typing.Optional[str]:
        base_url = type(self).base_url
        if base_url is None:
            base_url = get_settings().base_url
        return base_url

    def get_transport(self) -> Transport:
        transport = type(self).transport
        if transport is None:
            transport = get_default_transport()
        return transport

    def get_key_name(self) -> str:
        return type(self).primary_key

    def get_key(self) -> typing.Any:
        return self.get_attribute(self.get_key_name())

    def get_foreign_key(self) -> str:
        """
        Returns the name other resources use to refer to this one, e.g. ``userId``.
        """
        return self.get_name() + ucfirst(self.get_key_name())

    def is_singleton(self) -> bool:
        return type(self).singleton

    def exists(self) -> bool:
        return self.get_key_name() in self._attributes or self.is_singleton()

    def get_attributes(self) -> typing.Dict[str, typing.Any]:
        return dict(self._attributes)

    def get_attribute(self, key: str, default: typing.Any = None) -> typing.Any:
        return self._attributes.get(key, default)

    def has_attribute(self, key: str) -> bool:
        return key in self._attributes

    def set_attribute(self, key: str, value: typing.Any) -> None:
        self._attributes[key] = value

    def relation(self, name: str) -> Relation:
        """
        Builds the relation declared under ``name``.

        :raises RelationNotFoundError: if no such relation is declared.
        """
        try:
            factory = self._relation_factories[name]
        except KeyError:
            raise RelationNotFoundError(self, name)
        return factory(self)

    def relation_names(self) -> typing.Sequence[str]:
        return tuple(self._relation_factories)

    def get_relations(self) -> typing.Dict[str, RelationResult]:
        """
        Returns the relations resolved so far; nothing is fetched.
        """
        return {k: v() for k, v in self._relations.items() if v.resolved}

    def get_relation(self, name: str) -> RelationResult:
        """
        Returns the result of the relation declared under ``name``.

        Relations that were not part of the payload the model was filled with
        are fetched on first access; the result is kept for the lifetime of the
        model.  Undeclared names yield :py:const:`None`.
        """
        deferred = self._relations.get(name)
        if deferred is None:
            if name not in self._relation_factories:
                return None
            deferred = self._relations[name] = Deferred(self._load_relation, name)
        return deferred()

    def _load_relation(self, name: str) -> RelationResult:
        logger.debug("loading relation %s of %s %r", name, self.get_name(), self.get_key())
        return self.relation(name).get_results()

    def set_relation(self, name: str, value: RelationResult) -> None:
        self._relations[name] = Promise().set(value)

    def fill(self: Tm, attributes: JSONObject) -> Tm:
        """
        Fills the model with decoded data.

        A key naming a declared relation (either by its accessor or by the name
        the API uses for it) whose value is an object, an array or ``null`` is
        materialized through the relation; anything else becomes an attribute.
        Attributes are set before relations are filled.
        """
        relation_data: typing.List[typing.Tuple[str, JSONValue]] = []
        accessors: typing.Optional[typing.Mapping[str, str]] = None

        for key, value in attributes.items():
            if value is None or isinstance(value, (collections.abc.Mapping, list)):
                if accessors is None:
                    accessors = self._relation_accessors()
                accessor = accessors.get(key)
                if accessor is not None:
                    relation_data.append((accessor, value))
                    continue
            self._attributes[key] = value

        for accessor, value in relation_data:
            if value is None:
                self.set_relation(accessor, None)
            else:
                self.set_relation(accessor, self.relation(accessor).fill(value))

        return self

    def _relation_accessors(self) -> typing.Mapping[str, str]:
        # relation names are fixed per class
        cls = type(self)
        accessors = vars(cls).get("_relation_accessor_map")
        if accessors is None:
            names: typing.Dict[str, str] = {}
            for accessor in self._relation_factories:
                names[accessor] = accessor
            for accessor in self._relation_factories:
                names.setdefault(self.relation(accessor).get_name(), accessor)
            accessors = cls._relation_accessor_map = names
        return accessors

    def scope(self: Tm, context: str, key: typing.Any = None) -> Tm:
        """
        Returns a copy of the model placed under ``/<context>/<key>``.
        """
        return self.with_scopes([Scope(context, key)])

    def with_scopes(self: Tm, scopes: typing.Iterable[Scope]) -> Tm:
        """
        Returns a copy of the model whose scopes are extended by ``scopes``.
        The model itself is left untouched.
        """
        copy = type(self)(self.token, scopes=self.scopes + tuple(Scope(*s) for s in scopes))
        copy._attributes = dict(self._attributes)
        return copy

    def nest_under(self: Tm, owner: "Model") -> Tm:
        return self.with_scopes(
            owner.get_scopes() + (Scope(owner.get_endpoint(), owner.get_key()),)
        )

    def new_instance(self: Tm, attributes: typing.Optional[JSONObject] = None) -> Tm:
        """
        Returns a new model of the same type and scopes, filled with ``attributes``.
        """
        return type(self)(self.token, scopes=self.scopes).fill(attributes or {})

    def new_request(self) -> Request:
        return Request(self)

    def new_query(self) -> Query:
        return Query(self)

    def where(self, *arguments: typing.Any) -> Query:
        return self.new_query().where(*arguments)

    def with_(self, *relations: typing.Union[str, typing.Iterable[str]]) -> Query:
        return self.new_query().with_(*relations)

    def find(self, id: typing.Any) -> QueryResult:
        return self.new_query().find(id)

    def all(self) -> QueryResult:
        return self.new_query().get()

    def create(self: Tm, attributes: JSONObject) -> Tm:
        return self.new_instance(attributes).save()

    def update(self: Tm, attributes: JSONObject) -> Tm:
        return self.fill(attributes).save()

    def save(self: Tm) -> Tm:
        """
        Creates the resource if it does not exist yet, updates it otherwise,
        then fills the model with what the API sent back.
        """
        if self.deleted:
            raise ModelError(self, f'"{self.get_name()}" has been deleted and cannot be saved')

        request = self.new_request()
        if not self.exists():
            data = request.post()
        elif self.partial_updates:
            data = request.patch()
        else:
            data = request.put()

        if isinstance(data, collections.abc.Mapping):
            self.fill(data)
        return self

    def delete(self) -> bool:
        result = self.new_request().delete()
        self.deleted = True
        return result

    def belongs_to(
        self, related: ModelReference, foreign_key: typing.Optional[str] = None
    ) -> BelongsTo:
        return BelongsTo(self, self._make_related(related), foreign_key)

    def has_many(
        self, related: ModelReference, foreign_key: typing.Optional[str] = None
    ) -> HasMany:
        return HasMany(self, self._make_related(related), foreign_key)

    def nest(self, related: ModelReference) -> Nested:
        return Nested(self, self._make_related(related))

    def morph_to(
        self,
        related: typing.Iterable[ModelReference],
        morph_key: str,
        foreign_key: typing.Optional[str] = None,
        type_key: typing.Optional[str] = None,
    ) -> MorphTo:
        return MorphTo(
            self, [self._make_related(r) for r in related], morph_key, foreign_key, type_key
        )

    def _make_related(self, related: ModelReference) -> "Model":
        if isinstance(related, type):
            return related(self.token)
        return related

    def to_dict(self) -> typing.Dict[str, typing.Any]:
        """
        Returns the attributes merged with the relations resolved so far.
        """
        retval = self.get_attributes()
        for k, v in self.get_relations().items():
            if isinstance(v, (Model, Collection)):
                retval[k] = v.to_list() if isinstance(v, Collection) else v.to_dict()
            else:
                retval[k] = v
        return retval

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._attributes!r}>"

    def __init__(
        self,
        token: AccessToken,
        attributes: typing.Optional[JSONObject] = None,
        scopes: typing.Iterable[Scope] = (),
    ):
        if not type(self).endpoint:
            raise InvalidDeclarationError(
                f"{type(self).__name__} does not declare an API endpoint"
            )
        self.token = token
        self.scopes = tuple(Scope(*s) for s in scopes)
        self.deleted = False
        self._attributes = {}
        self._relations = {}
        if attributes:
            self.fill(attributes)
