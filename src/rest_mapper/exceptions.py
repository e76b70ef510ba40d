import abc
import typing

from .utils import english_enumerate


class RestMapperException(Exception, metaclass=abc.ABCMeta):
    pass


class InvalidDeclarationError(RestMapperException):
    message: str

    def __str__(self):
        return self.message

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TransportError(RestMapperException):
    """
    Raised by a :py:class:`Transport` when a request could not be completed.
    ``response`` is set when the server answered with a non-2xx status and
    left unset for failures that never produced a response (DNS, TLS, timeouts...).
    """

    message: str
    response: typing.Optional["interfaces.TransportResponse"]

    @property
    def status_code(self) -> typing.Optional[int]:
        if self.response is None:
            return None
        return self.response.status_code

    def __str__(self):
        return self.message

    def __init__(
        self,
        message: str,
        response: typing.Optional["interfaces.TransportResponse"] = None,
    ):
        super().__init__(message)
        self.message = message
        self.response = response


class ModelError(RestMapperException):
    """
    The base class for every error raised on behalf of a model.
    The model that triggered the error is always available as ``model``.
    """

    model: "models.Model"
    code: int
    _message: typing.Optional[str]

    @property
    def message(self) -> str:
        if self._message:
            return self._message
        return f'request for "{self.model.get_name()}" failed'

    def __str__(self):
        return self.message

    def __init__(
        self,
        model: "models.Model",
        message: typing.Optional[str] = None,
        code: int = 0,
    ):
        super().__init__(message)
        self.model = model
        self._message = message
        self.code = code


class InvalidModelError(ModelError):
    errors: typing.Any
    """
    Field-level error details as sent by the API.
    """

    @property
    def message(self) -> str:
        if self._message:
            return self._message
        return f'"{self.model.get_name()}" was rejected as invalid'

    def __init__(
        self,
        model: "models.Model",
        message: typing.Optional[str] = None,
        errors: typing.Any = None,
        code: int = 400,
    ):
        super().__init__(model, message, code)
        self.errors = errors if errors is not None else {}


class ModelNotFoundError(ModelError):
    @property
    def message(self) -> str:
        if self._message:
            return self._message
        return f'no "{self.model.get_name()}" found'

    def __init__(
        self,
        model: "models.Model",
        message: typing.Optional[str] = None,
        code: int = 404,
    ):
        super().__init__(model, message, code)


class InvalidQueryArgumentsError(ModelError):
    arguments: typing.Sequence[typing.Any]

    @property
    def message(self) -> str:
        return (
            "an invalid set of query arguments was provided: "
            f"expected 2 or 3 arguments, got {len(self.arguments)}"
        )

    def __init__(self, model: "models.Model", arguments: typing.Sequence[typing.Any]):
        super().__init__(model)
        self.arguments = arguments


class UnknownOperatorError(ModelError):
    operator: str

    @property
    def message(self) -> str:
        return f'the supplied query operator "{self.operator}" is not valid'

    def __init__(self, model: "models.Model", operator: str):
        super().__init__(model)
        self.operator = operator


class RelationNotFoundError(ModelError):
    name: str

    @property
    def message(self) -> str:
        return f'no relation "{self.name}" is declared on "{self.model.get_name()}"'

    def __init__(self, model: "models.Model", name: str):
        super().__init__(model)
        self.name = name


class UnknownMorphTypeError(ModelError):
    type_name: typing.Any
    candidates: typing.Sequence[str]

    @property
    def message(self) -> str:
        return (
            f'"{self.model.get_name()}" refers to an unknown type {self.type_name!r} '
            f"(expected {english_enumerate(self.candidates, ', or ')})"
        )

    def __init__(
        self, model: "models.Model", type_name: typing.Any, candidates: typing.Sequence[str]
    ):
        super().__init__(model)
        self.type_name = type_name
        self.candidates = candidates


if typing.TYPE_CHECKING:
    from . import interfaces  # noqa: E402
    from . import models  # noqa: E402
