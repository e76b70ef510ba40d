from .formatting import camel_case, english_enumerate, lcfirst, ucfirst  # noqa
from .typing import assert_not_none  # noqa
