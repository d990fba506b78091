from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)

CURRENT_DOCUMENT_VERSION = "1.0"


def migrate_bare_scenario_list(scenarios: list[Any]) -> dict[str, Any]:
    """
    Wrap a pre-client scenario export (a bare JSON array) in a v1.0 document.
    """
    logger.warning(
        "Migrating bare scenario list (%d scenarios) to document version %s. "
        "Re-export the file to suppress this warning.",
        len(scenarios),
        CURRENT_DOCUMENT_VERSION,
    )
    return {"version": CURRENT_DOCUMENT_VERSION, "scenarios": list(scenarios)}


def migrate_unversioned_document(document: dict[str, Any]) -> dict[str, Any]:
    """
    Stamp a document that carries clients or scenarios but no version.
    """
    logger.warning(
        "Scenario document has no version; assuming %s. Add a 'version' field to suppress this warning.",
        CURRENT_DOCUMENT_VERSION,
    )
    migrated = dict(document)
    migrated["version"] = CURRENT_DOCUMENT_VERSION
    return migrated


def migrate_scenario_document(payload: Any) -> Any:
    """
    Run all migrations to bring a decoded scenario document to the current version.

    Payloads that are neither a list nor a mapping are returned unchanged so
    contract validation can report them.
    """
    if isinstance(payload, list):
        return migrate_bare_scenario_list(payload)

    if isinstance(payload, dict) and not payload.get("version"):
        if "clients" in payload or "scenarios" in payload:
            return migrate_unversioned_document(payload)

    return payload
