"""
Masjids app services layer.

Masjid CRM records, masjid collections and offline income.
"""

from .exceptions import (
    MasjidsServiceError,
    NotRecordOwnerError,
)

from .records import (
    normalize_string,
    normalize_fields,
    ensure_can_edit,
    record_collection,
    record_offline_income,
    search_masjids,
    search_collections,
    search_offline_income,
)


__all__ = [
    # Exceptions
    'MasjidsServiceError',
    'NotRecordOwnerError',

    # Records
    'normalize_string',
    'normalize_fields',
    'ensure_can_edit',
    'record_collection',
    'record_offline_income',
    'search_masjids',
    'search_collections',
    'search_offline_income',
]
