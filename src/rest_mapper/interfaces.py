"""
This module contains the interface definitions of the collaborators the mapper
depends on but does not implement itself: the bearer credential and the HTTP
transport.  :py:mod:`rest_mapper.defaults` provides ready-made implementations.

"""
import abc
import typing

from .types import Headers, JSONValue, QueryParams


class AccessToken(metaclass=abc.ABCMeta):
    """
    An :py:class:`AccessToken` is an opaque bearer credential.
    Models only ever read it; acquiring or refreshing it is up to the caller.
    """

    @property
    @abc.abstractmethod
    def value(self) -> str:
        """
        Returns the bearer string sent in the ``Authorization`` header.
        """
        ...  # pragma: nocover


class TransportResponse(typing.Protocol):
    status_code: int
    content: bytes


class Transport(metaclass=abc.ABCMeta):
    """
    A :py:class:`Transport` performs a single HTTP round trip.

    Implementations must raise :py:class:`rest_mapper.exceptions.TransportError`
    for non-2xx responses (carrying the response) and for failures that did not
    yield any response at all.
    """

    @abc.abstractmethod
    def request(
        self,
        method: str,
        url: str,
        params: typing.Optional[QueryParams] = None,
        headers: typing.Optional[Headers] = None,
        json: JSONValue = None,
    ) -> TransportResponse:
        """
        Sends a request.

        :param str method: the HTTP verb.
        :param str url: the fully assembled URL.
        :param Optional[Dict[str, JSONScalar]] params: query string parameters.
        :param Optional[Dict[str, str]] headers: request headers.
        :param JSONValue json: the request body, to be encoded as JSON.
        :return: The response.
        """
        ...  # pragma: nocover
