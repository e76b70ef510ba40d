import re
import typing

_word_separators = re.compile(r"[\s_\-]+")


def english_enumerate(items: typing.Iterable[str], conj: str = ", and ") -> str:
    buf = []

    i = iter(items)
    try:
        x = next(i)
    except StopIteration:
        return ""
    buf.append(x)

    lx: typing.Optional[str] = None

    for x in i:
        if lx is not None:
            buf.append(", ")
            buf.append(lx)
        lx = x
    if lx is not None:
        buf.append(conj)
        buf.append(lx)
    return "".join(buf)


def lcfirst(value: str) -> str:
    return value[:1].lower() + value[1:]


def ucfirst(value: str) -> str:
    return value[:1].upper() + value[1:]


def camel_case(value: str) -> str:
    """
    Converts a resource path segment such as ``blog-posts`` or ``blog_posts``
    into its camel-cased form (``blogPosts``).
    """
    words = [word for word in _word_separators.split(value) if word]
    if not words:
        return ""
    return lcfirst(words[0]) + "".join(ucfirst(word) for word in words[1:])
