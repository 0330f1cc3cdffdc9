"""URI-reference resolution for ``id`` and ``$ref`` values."""

from urllib.parse import urldefrag, urljoin


def resolve_reference(scope: str, reference: str) -> str:
    """Resolve ``reference`` against the resolution scope ``scope``.

    An absolute URI replaces the scope, a path-only reference is resolved
    relative to the scope's path and a fragment-only reference replaces the
    scope's fragment.
    """
    if not scope:
        return reference
    if reference.startswith("#"):
        return urldefrag(scope).url + reference
    return urljoin(scope, reference)


def split_reference(reference: str) -> tuple[str, str]:
    """Split an absolute reference into its document URI and ``#``-prefixed fragment."""
    document_uri, fragment = urldefrag(reference)
    return document_uri, "#" + fragment


def canonical_reference(reference: str) -> str:
    """Cache key for a reference: document URI plus a fragment that always starts with ``#``."""
    document_uri, fragment = split_reference(reference)
    return document_uri + fragment
