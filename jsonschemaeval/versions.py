"""
Schema drafts and vocabularies.

A keyword declares the drafts it is valid under as a `SchemaVersion` flag set
and the vocabulary it belongs to. The orchestrator skips keywords whose gates
are not active for the current validation.
"""

from dataclasses import dataclass
from enum import IntFlag
from typing import Dict, FrozenSet, Optional


class SchemaVersion(IntFlag):
    """Known JSON Schema drafts as combinable flags."""
    NONE = 0
    DRAFT04 = 1
    DRAFT06 = 2
    DRAFT07 = 4
    DRAFT08 = 8
    DRAFT2019_09 = 16
    ALL = DRAFT04 | DRAFT06 | DRAFT07 | DRAFT08 | DRAFT2019_09


# Drafts in which `$ref` overrides every sibling keyword
REF_OVERRIDES_SIBLINGS = SchemaVersion.DRAFT04 | SchemaVersion.DRAFT06 | SchemaVersion.DRAFT07 | SchemaVersion.DRAFT08


def id_keyword_name(version: SchemaVersion) -> str:
    """The keyword that establishes a base URI under `version`."""
    return 'id' if version & SchemaVersion.DRAFT04 else '$id'


METASCHEMA_URIS: Dict[str, SchemaVersion] = {
    'http://json-schema.org/draft-04/schema#': SchemaVersion.DRAFT04,
    'http://json-schema.org/draft-06/schema#': SchemaVersion.DRAFT06,
    'http://json-schema.org/draft-07/schema#': SchemaVersion.DRAFT07,
    'http://json-schema.org/draft-08/schema#': SchemaVersion.DRAFT08,
    'https://json-schema.org/draft/2019-09/schema': SchemaVersion.DRAFT2019_09,
}

DRAFT_NAMES: Dict[str, SchemaVersion] = {
    '04': SchemaVersion.DRAFT04,
    '06': SchemaVersion.DRAFT06,
    '07': SchemaVersion.DRAFT07,
    '08': SchemaVersion.DRAFT08,
    '2019-09': SchemaVersion.DRAFT2019_09,
}


def version_from_metaschema_uri(uri: str) -> Optional[SchemaVersion]:
    """Maps a `$schema` URI to a draft, tolerating a missing or extra trailing `#`."""
    if not isinstance(uri, str):
        return None
    if uri in METASCHEMA_URIS:
        return METASCHEMA_URIS[uri]
    alternate = uri[:-1] if uri.endswith('#') else uri + '#'
    return METASCHEMA_URIS.get(alternate)


@dataclass(frozen=True)
class SchemaVocabulary:
    """A named group of keywords that can be enabled or disabled as a unit."""
    id: str
    metaschema_id: Optional[str] = None

    def __str__(self) -> str:
        return self.id


class SchemaVocabularies:
    """The 2019-09 vocabularies."""
    CORE = SchemaVocabulary('https://json-schema.org/draft/2019-09/vocab/core',
                            'https://json-schema.org/draft/2019-09/meta/core')
    APPLICATOR = SchemaVocabulary('https://json-schema.org/draft/2019-09/vocab/applicator',
                                  'https://json-schema.org/draft/2019-09/meta/applicator')
    VALIDATION = SchemaVocabulary('https://json-schema.org/draft/2019-09/vocab/validation',
                                  'https://json-schema.org/draft/2019-09/meta/validation')
    META_DATA = SchemaVocabulary('https://json-schema.org/draft/2019-09/vocab/meta-data',
                                 'https://json-schema.org/draft/2019-09/meta/meta-data')

    @classmethod
    def all(cls) -> FrozenSet[SchemaVocabulary]:
        return frozenset([cls.CORE, cls.APPLICATOR, cls.VALIDATION, cls.META_DATA])
