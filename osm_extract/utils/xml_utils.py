"""XML text helpers for the GPX and OSM XML writers."""
from typing import Any, Iterable, Tuple

_XML_ESCAPES = str.maketrans({
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#39;',
})


def xml_escape(value: Any) -> str:
    """Escape a value for XML text or a double-quoted attribute.

    Examples:
        >>> xml_escape("Tom & Jerry")
        'Tom &amp; Jerry'
        >>> xml_escape(42)
        '42'
    """
    return str(value).translate(_XML_ESCAPES)


def xml_attrs(pairs: Iterable[Tuple[str, Any]]) -> str:
    """Render ``(name, value)`` pairs as ` name="value"` attributes.

    Pairs with a None value are left out.
    """
    return ''.join(
        f' {name}="{xml_escape(value)}"' for name, value in pairs if value is not None
    )
