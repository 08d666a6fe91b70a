"""i18n audit helpers.

Checks that catalogs stay aligned:
 - Missing keys: referenced in code, or present in the reference locale, but
   absent from another locale.
 - Unused keys: present in a catalog but not referenced by any scanned source.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, TypedDict

from . import extract_translation_keys

__all__ = ["LocaleAuditResult", "audit_catalogs"]


class LocaleAuditResult(TypedDict):
    locale: str
    missing: List[str]
    unused: List[str]


def audit_catalogs(
    catalogs: Mapping[str, Mapping[str, str]],
    *,
    reference: str = "es",
    paths: Optional[Iterable[str | Path]] = None,
) -> Dict[str, LocaleAuditResult]:
    """Audit every catalog against the reference locale and (optionally) source usage."""
    expected = set(catalogs.get(reference, {}).keys())
    used = extract_translation_keys(paths) if paths is not None else None
    if used is not None:
        expected |= used
    results: Dict[str, LocaleAuditResult] = {}
    for locale, catalog in catalogs.items():
        keys = set(catalog.keys())
        results[locale] = {
            "locale": locale,
            "missing": sorted(expected - keys),
            "unused": sorted(keys - used) if used is not None else [],
        }
    return results
