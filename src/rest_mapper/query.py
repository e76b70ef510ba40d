import dataclasses
import typing

from .collection import Collection
from .exceptions import InvalidQueryArgumentsError, ModelNotFoundError, UnknownOperatorError
from .factory import Factory

OPERATORS = frozenset(
    {
        "=",
        "!=",
        "<>",
        "<",
        "<=",
        ">",
        ">=",
        "in",
        "not-in",
        "like",
        "not-like",
    }
)

QueryResult = typing.Union["Model", Collection["Model"], None]


@dataclasses.dataclass(frozen=True)
class Condition:
    field: str
    operator: str
    value: typing.Any


@dataclasses.dataclass
class Clauses:
    """
    The accumulated state of a :py:class:`Query` in a plain form, ready to be
    handed over to an :py:class:`Adapter`.
    """

    id: typing.Any = None
    """
    The value of the primary key condition, pulled out of ``where``.
    """

    expand: typing.Sequence[str] = ()
    where: typing.Sequence[Condition] = ()
    sort: typing.Mapping[str, str] = dataclasses.field(default_factory=dict)
    fields: typing.Sequence[str] = ()
    limit: typing.Optional[int] = None
    offset: typing.Optional[int] = None


class Query:
    """
    A fluent query against the resource a model represents.
    Every chaining method mutates the query and returns it.

    :param Model model: the model being queried.
    """

    model: "Model"
    _expand: typing.List[str]
    _where: typing.List[Condition]
    _sort: typing.Dict[str, str]
    _fields: typing.List[str]
    _limit: typing.Optional[int] = None
    _offset: typing.Optional[int] = None

    @property
    def conditions(self) -> typing.Sequence[Condition]:
        """
        Every condition added so far, including the one on the primary key.
        """
        return tuple(self._where)

    def where(self, *arguments: typing.Any) -> "Query":
        """
        Adds a condition.  Accepts either ``(field, value)``, in which case the
        operator is ``=``, or ``(field, operator, value)``.

        :raises InvalidQueryArgumentsError: if called with any other number of arguments.
        :raises UnknownOperatorError: if the operator is not supported.
        """
        if len(arguments) == 2:
            field, value = arguments
            operator = "="
        elif len(arguments) == 3:
            field, operator, value = arguments
            operator = str(operator).lower()
            if operator not in OPERATORS:
                raise UnknownOperatorError(self.model, operator)
        else:
            raise InvalidQueryArgumentsError(self.model, arguments)

        self._where.append(Condition(field, operator, value))
        return self

    def where_in(self, field: str, values: typing.Iterable[typing.Any]) -> "Query":
        self._where.append(Condition(field, "in", ",".join(str(v) for v in values)))
        return self

    def where_not_in(self, field: str, values: typing.Iterable[typing.Any]) -> "Query":
        self._where.append(Condition(field, "not-in", ",".join(str(v) for v in values)))
        return self

    def where_null(self, field: str) -> "Query":
        self._where.append(Condition(field, "=", None))
        return self

    def where_not_null(self, field: str) -> "Query":
        self._where.append(Condition(field, "!=", None))
        return self

    def limit(self, limit: typing.Optional[int]) -> "Query":
        self._limit = limit
        return self

    def take(self, amount: typing.Optional[int]) -> "Query":
        return self.limit(amount)

    def offset(self, offset: typing.Optional[int]) -> "Query":
        self._offset = offset
        return self

    def order_by(self, field: str, direction: str = "asc") -> "Query":
        self._sort[field] = direction
        return self

    def select(self, *fields: typing.Union[str, typing.Iterable[str]]) -> "Query":
        for field in fields:
            for name in [field] if isinstance(field, str) else field:
                if name not in self._fields:
                    self._fields.append(name)
        return self

    def with_(self, *relations: typing.Union[str, typing.Iterable[str]]) -> "Query":
        """
        Asks for related resources to be expanded in the response.

        Each path is a dot-delimited chain of relation accessors, e.g.
        ``"author.company"``: ``author`` is looked up on the queried model and
        ``company`` on the model ``author`` relates to.  Paths are stored as
        the relations' declared names, which is how the API addresses them.

        :raises RelationNotFoundError: if a segment does not name a declared relation.
        """
        for item in relations:
            for path in [item] if isinstance(item, str) else item:
                name = self._resolve_relation_path(path)
                if name not in self._expand:
                    self._expand.append(name)
        return self

    def _resolve_relation_path(self, path: str) -> str:
        names: typing.List[str] = []
        relation: typing.Optional["Relation"] = None
        for segment in path.split("."):
            owner = relation.get_related() if relation is not None else self.model
            relation = owner.relation(segment)
            names.append(relation.get_name())
        return ".".join(names)

    def get(self) -> QueryResult:
        """
        Executes the query.

        :return: A single model for lookups by primary key and singletons,
                 a :py:class:`Collection` otherwise, or :py:const:`None` when
                 a lookup found nothing.
        """
        data = self.model.new_request().get(self)
        if data is None:
            return None
        return Factory(self.model).make(data)

    def find(self, id: typing.Any) -> QueryResult:
        self.where(self.model.get_key_name(), id)
        return self.get()

    def first(self) -> typing.Optional["Model"]:
        result = self.get()
        if isinstance(result, Collection):
            return result.first()
        return result

    def first_or_fail(self) -> "Model":
        result = self.first()
        if result is None:
            raise ModelNotFoundError(self.model)
        return result

    def get_model(self) -> "Model":
        return self.model

    def get_clauses(self) -> Clauses:
        """
        Returns the accumulated state.  The first ``=`` condition on the
        primary key is moved out of ``where`` into ``id``; unset or zero
        ``limit`` and ``offset`` come out as :py:const:`None`.
        """
        key_name = self.model.get_key_name()
        where = list(self._where)
        id_ = None
        for i, condition in enumerate(where):
            if condition.field == key_name and condition.operator == "=":
                id_ = condition.value
                del where[i]
                break

        return Clauses(
            id=id_,
            expand=tuple(self._expand),
            where=tuple(where),
            sort=dict(self._sort),
            fields=tuple(self._fields),
            limit=self._limit or None,
            offset=self._offset or None,
        )

    def __init__(self, model: "Model"):
        self.model = model
        self._expand = []
        self._where = []
        self._sort = {}
        self._fields = []


if typing.TYPE_CHECKING:
    from .models import Model  # noqa: E402
    from .relations import Relation  # noqa: E402
