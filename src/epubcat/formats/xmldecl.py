# ABOUTME: Rewrites XML 1.1 version declarations to 1.0 before parsing.
# ABOUTME: Only the declaration is touched; the rest of the document is byte-for-byte intact.

import re

# Optional UTF-8 BOM, then "<?xml" followed by whitespace, up to the first "?>"
_DECLARATION_RE = re.compile(rb"\A(?:\xef\xbb\xbf)?<\?xml\s.*?\?>", re.DOTALL)

_VERSION_11_RE = re.compile(rb"""(\bversion\s*=\s*)(["'])1\.1\2""")


def normalize_xml_declaration(content: bytes) -> bytes:
    """Downgrade an XML 1.1 declaration to 1.0.

    EPUB container and package documents are often declared as XML 1.1 while
    using nothing beyond 1.0, so a textual substitution of the version
    attribute is enough to make them palatable to a 1.0 parser. Quote style
    and spacing around ``=`` are preserved.

    Args:
        content: The complete, buffered XML document.

    Returns:
        The document with ``version="1.1"`` rewritten to ``version="1.0"``
        inside the leading declaration, or ``content`` unchanged if there is
        no declaration or it does not declare version 1.1.
    """
    match = _DECLARATION_RE.match(content)
    if match is None:
        return content

    declaration = match.group(0)
    rewritten = _VERSION_11_RE.sub(rb"\g<1>\g<2>1.0\g<2>", declaration, count=1)
    if rewritten == declaration:
        return content
    return rewritten + content[match.end():]
