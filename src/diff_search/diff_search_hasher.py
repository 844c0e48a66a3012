"""Placeholder object ids for synthesized diff headers."""

import struct


def content_fingerprint(content: str) -> str:
    """
    Produce a short fingerprint of some text content.

    This is the 32-bit rolling hash `hash = hash * 31 + code_unit` over the
    UTF-16 code units of the content, wrapped to a signed 32-bit value and
    rendered as up to 7 lowercase hex digits of its absolute value.

    The result is cosmetic: it fills the `index` line of a synthesized diff
    header so the header looks like one produced by git.  It is not a git
    object id and collides easily, so it must never be used to compare
    content.  Changing the scheme changes every synthesized header.

    Args:
        content: Text to fingerprint

    Returns:
        Fingerprint string (1 to 7 hex digits)
    """
    value = 0
    data = content.encode('utf-16-le', errors='surrogatepass')
    for (code_unit,) in struct.iter_unpack('<H', data):
        value = (value * 31 + code_unit) & 0xFFFFFFFF

    if value & 0x80000000:
        value -= 0x100000000

    return format(abs(value), 'x')[:7]
