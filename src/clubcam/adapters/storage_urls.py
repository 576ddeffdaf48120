"""Public URL construction for objects in Supabase storage."""

from dataclasses import dataclass
from urllib.parse import quote

from clubcam.errors import ConfigurationError, EncodingError

# Path characters kept unescaped besides the unreserved set; ";" is escaped.
_PATH_SAFE = "/!$&'()*+,=:@"


@dataclass(frozen=True)
class StorageUrlResolver:
    """Builds ``<base>/storage/v1/object/public/<bucket>/<path>`` URLs.

    The stored path is used verbatim: an existing ``photos/`` prefix is kept and
    no prefix is ever added. Only surrounding whitespace and leading slashes are
    removed before encoding.
    """

    base_url: str
    bucket: str

    def resolve(self, path: str) -> str:
        """Return the public URL for a storage path."""
        base = self.base_url.strip().rstrip("/")
        if not base:
            raise ConfigurationError("Missing Supabase URL configuration")
        clean_path = path.strip().lstrip("/")
        if not clean_path:
            raise EncodingError("Storage path is empty")
        try:
            encoded_path = quote(clean_path, safe=_PATH_SAFE)
            encoded_bucket = quote(self.bucket.strip("/"), safe="")
        except UnicodeEncodeError as exc:
            raise EncodingError(f"Failed to encode path: {path!r}") from exc
        return f"{base}/storage/v1/object/public/{encoded_bucket}/{encoded_path}"
