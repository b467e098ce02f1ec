"""In-memory store of `$ref` targets, populated before validation begins."""

import logging
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple
from urllib.parse import unquote, urldefrag, urljoin

from jsonpointer import JsonPointer, JsonPointerException

from jsonschemaeval.versions import SchemaVersion

if TYPE_CHECKING:
    from jsonschemaeval.schema import JsonSchema

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Maps absolute schema URIs to schema nodes registered under one draft."""

    def __init__(self, version: SchemaVersion = SchemaVersion.DRAFT2019_09):
        self.version = version
        self._schemas: Dict[str, 'JsonSchema'] = {}

    def register(self, uri: Optional[str], schema: 'JsonSchema') -> None:
        key = uri or ''
        if key.endswith('#'):
            key = key[:-1]
        existing = self._schemas.get(key)
        if existing is not None and existing is not schema:
            logger.warning("Schema URI %s registered more than once; keeping the first", key)
            return
        self._schemas[key] = schema

    def get(self, uri: Optional[str]) -> Optional['JsonSchema']:
        key = uri or ''
        if key.endswith('#'):
            key = key[:-1]
        return self._schemas.get(key)

    def resolve(self, reference: str, base_uri: Optional[str]) -> Tuple[Optional['JsonSchema'], str]:
        """
        Resolves a `$ref` value against a base URI.

        Returns:
            The target schema (or None) and the target's absolute URI, which
            becomes the base URI of the target's resolution scope.
        """
        full_uri = urljoin(base_uri or '', reference)
        document_uri, fragment = urldefrag(full_uri)
        document = self.get(document_uri)
        if document is None:
            logger.debug("No document registered for %s", document_uri or '<root>')
            return None, full_uri
        if not fragment:
            return document, document_uri
        fragment = unquote(fragment)
        if fragment.startswith('/'):
            try:
                pointer = JsonPointer(fragment)
            except JsonPointerException:
                logger.debug("Malformed pointer fragment %s", fragment)
                return None, full_uri
            return document.resolve_subschema(pointer.parts, document_uri), full_uri
        # plain-name fragments are registered by `$anchor` or fragment-only `$id`
        return self.get(full_uri), document_uri

    def __contains__(self, uri: str) -> bool:
        return self.get(uri) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)
