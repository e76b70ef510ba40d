import collections.abc
import dataclasses
import json
import logging
import typing

from .interfaces import TransportResponse
from .types import Headers, JSONObject, JSONScalar, JSONValue, QueryParams

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ErrorPayload:
    """
    The decoded body of an error response.
    Every field is :py:const:`None` when the API did not provide it.
    """

    description: typing.Optional[str] = None
    """
    Value of ``errorDescription``.
    """

    details: typing.Any = None
    """
    Value of ``errorDetails``; its structure is up to the API.
    """

    code: typing.Any = None
    """
    Value of ``errorCode``.
    """


def _render_value(value: typing.Any) -> JSONScalar:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class Adapter:
    """
    Translates between the abstract clause set of a :py:class:`Query` and the
    wire format, and decodes response bodies.

    :param Model model: the model requests are made for.
    """

    model: "Model"

    def get_headers(self) -> Headers:
        return {
            "Authorization": f"Bearer {self.model.get_token().value}",
            "Accept": "application/json",
        }

    def format_clauses(self, clauses: "Clauses") -> QueryParams:
        """
        Builds the query string parameters for the given clauses.

        Conditions become top-level parameters keyed by field name.  Parameters
        that end up empty are left out.

        :param Clauses clauses: the clauses, primary key condition already pulled out.
        :return: A dictionary of query string parameters.
        """
        params: typing.Dict[str, typing.Any] = {
            "expand": ",".join(clauses.expand),
            "sort": ",".join(
                f"-{field}" if str(direction).lower() == "desc" else field
                for field, direction in clauses.sort.items()
            ),
            "fields": ",".join(clauses.fields),
            "limit": clauses.limit,
            "offset": clauses.offset,
        }

        for condition in clauses.where:
            params[condition.field] = _render_value(condition.value)

        return {k: v for k, v in params.items() if v is not None and v != ""}

    def extract(self, response: TransportResponse) -> JSONValue:
        content = response.content
        if not content:
            return None
        try:
            return json.loads(content)
        except ValueError:
            logger.debug("undecodable response body for %s", self.model.get_name())
            return None

    def extract_errors(self, response: TransportResponse) -> ErrorPayload:
        data = self.extract(response)
        if not isinstance(data, collections.abc.Mapping):
            return ErrorPayload()
        return ErrorPayload(
            description=data.get("errorDescription"),
            details=data.get("errorDetails"),
            code=data.get("errorCode"),
        )

    def prepare(self, model: "Model") -> JSONObject:
        return model.get_attributes()

    def __init__(self, model: "Model"):
        self.model = model


if typing.TYPE_CHECKING:
    from .models import Model  # noqa: E402
    from .query import Clauses  # noqa: E402
