from .adapter import Adapter, ErrorPayload  # noqa
from .collection import Collection  # noqa
from .config import Settings, get_settings  # noqa
from .defaults import BearerToken, RequestsTransport, get_default_transport  # noqa
from .exceptions import (  # noqa
    InvalidDeclarationError,
    InvalidModelError,
    InvalidQueryArgumentsError,
    ModelError,
    ModelNotFoundError,
    RelationNotFoundError,
    RestMapperException,
    TransportError,
    UnknownMorphTypeError,
    UnknownOperatorError,
)
from .factory import Factory  # noqa
from .interfaces import AccessToken, Transport, TransportResponse  # noqa
from .models import Model, Scope, relation  # noqa
from .query import OPERATORS, Clauses, Condition, Query  # noqa
from .relations import BelongsTo, HasMany, MorphTo, Nested, Relation  # noqa
from .request import Request  # noqa
