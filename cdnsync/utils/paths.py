"""
Remote path helpers
"""
from urllib.parse import quote, unquote, urlsplit

# Characters left unescaped in a URL path segment besides unreserved ones
_PATH_SAFE = "/$&+,:;=@!'()*"


def normalize_remote_path(key):
    """Turn an object key into the path form CloudFront expects.

    A leading ``/`` is enforced, percent-escapes already in the key are
    decoded and the path is re-escaped once.  A ``?query`` suffix is kept
    as-is.

    Args:
        key: Object key, e.g. ``docs/read me.html``

    Returns:
        Normalized path, e.g. ``/docs/read%20me.html``

    Example:
        >>> normalize_remote_path("a.txt")
        '/a.txt'
        >>> normalize_remote_path("/img/logo%20v2.png")
        '/img/logo%20v2.png'
    """
    parts = urlsplit("/" + key.lstrip("/"), allow_fragments=False)
    # Undecodable filename bytes arrive as surrogates; escape them byte for byte
    path = quote(unquote(parts.path, errors="surrogateescape"),
                 safe=_PATH_SAFE, errors="surrogateescape")
    if not path.startswith("/"):
        path = "/" + path
    if parts.query:
        return f"{path}?{parts.query}"
    return path
