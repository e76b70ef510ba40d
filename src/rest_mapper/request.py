import logging
import typing
from urllib.parse import quote

from .adapter import Adapter
from .exceptions import (
    InvalidModelError,
    ModelError,
    ModelNotFoundError,
    TransportError,
)
from .interfaces import Transport, TransportResponse
from .types import JSONObject, JSONValue, QueryParams

logger = logging.getLogger(__name__)


class Request:
    """
    Performs the HTTP calls on behalf of a single model.

    The URL of a call is made of the base URL, the model's prefix, its scopes
    (each one contributing its context and, when set, its key), its endpoint,
    and finally the resource identifier if one applies.

    :param Model model: the model.
    :param Optional[Transport] transport: the transport; defaults to the model's.
    :param Optional[Adapter] adapter: the adapter; defaults to a new :py:class:`Adapter`.
    :param Optional[str] base_url: the base URL; defaults to the model's.
    """

    model: "Model"
    adapter: Adapter
    transport: Transport
    base_url: typing.Optional[str]

    def get(self, query: "Query") -> JSONValue:
        """
        Fetches the resource(s) the query describes.

        :return: The decoded payload; :py:const:`None` when a lookup by
                 identifier or a singleton yields nothing (including a 404),
                 and an empty list when a listing yields nothing.
        """
        clauses = query.get_clauses()
        lookup = clauses.id is not None or self.model.is_singleton()

        try:
            response = self._send("GET", clauses.id, params=self.adapter.format_clauses(clauses))
        except TransportError as e:
            if lookup and e.status_code == 404:
                logger.debug("%s %r not found", self.model.get_name(), clauses.id)
                return None
            raise self.translate_error(e) from e

        data = self.adapter.extract(response)
        if not data:
            return None if lookup else []
        return data

    def put(self) -> JSONValue:
        return self._write("PUT", self.model.get_key())

    def patch(self) -> JSONValue:
        return self._write("PATCH", self.model.get_key())

    def post(self) -> JSONValue:
        return self._write("POST", None)

    def delete(self) -> bool:
        try:
            self._send("DELETE", self.model.get_key())
        except TransportError as e:
            raise self.translate_error(e) from e
        return True

    def _write(self, method: str, resource_id: typing.Any) -> JSONValue:
        body: JSONObject = self.adapter.prepare(self.model)
        try:
            response = self._send(method, resource_id, json=body)
        except TransportError as e:
            raise self.translate_error(e) from e
        return self.adapter.extract(response)

    def _send(
        self,
        method: str,
        resource_id: typing.Any = None,
        params: typing.Optional[QueryParams] = None,
        json: JSONValue = None,
    ) -> TransportResponse:
        url = self.build_url(resource_id)
        logger.debug("%s %s params=%r", method, url, params)
        return self.transport.request(
            method,
            url,
            params=params,
            headers=self.adapter.get_headers(),
            json=json,
        )

    def build_url(self, resource_id: typing.Any = None) -> str:
        segments: typing.List[str] = []
        prefix = self.model.get_prefix()
        if prefix:
            segments.append(prefix.strip("/"))
        for scope in self.model.get_scopes():
            segments.append(str(scope.context).strip("/"))
            if scope.key is not None:
                segments.append(quote(str(scope.key), safe=""))
        segments.append(self.model.get_endpoint().strip("/"))
        if resource_id is not None and resource_id != "":
            segments.append(quote(str(resource_id), safe=""))

        path = "/".join(segment for segment in segments if segment)
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{path}"
        return f"/{path}"

    def translate_error(self, e: TransportError) -> ModelError:
        """
        Maps a transport failure onto the model error taxonomy:
        400 yields :py:class:`InvalidModelError`, 404 :py:class:`ModelNotFoundError`
        and anything else, including failures without a response, :py:class:`ModelError`.
        """
        response = e.response
        if response is None:
            logger.warning("request for %s failed: %s", self.model.get_name(), e)
            return ModelError(self.model, str(e))

        error = self.adapter.extract_errors(response)
        status = response.status_code
        logger.warning(
            "request for %s failed with status %d: %s",
            self.model.get_name(),
            status,
            error.description,
        )
        if status == 400:
            return InvalidModelError(self.model, error.description, error.details)
        elif status == 404:
            return ModelNotFoundError(self.model, error.description)
        else:
            return ModelError(self.model, error.description, status)

    def __init__(
        self,
        model: "Model",
        transport: typing.Optional[Transport] = None,
        adapter: typing.Optional[Adapter] = None,
        base_url: typing.Optional[str] = None,
    ):
        self.model = model
        self.transport = transport if transport is not None else model.get_transport()
        self.adapter = adapter if adapter is not None else Adapter(model)
        self.base_url = base_url if base_url is not None else model.get_base_url()


if typing.TYPE_CHECKING:
    from .models import Model  # noqa: E402
    from .query import Query  # noqa: E402
