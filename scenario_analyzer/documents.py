from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from scenario_analyzer.core import ScenarioNotFoundError, as_mapping
from scenario_analyzer.utils.contracts import LENIENT, validate_document
from scenario_analyzer.utils.migration import migrate_scenario_document

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def load_scenario_document(path: Path, mode: str = LENIENT) -> Any:
    """Read, migrate and validate a scenario-set document."""
    return prepare_scenario_document(read_json(path), mode=mode)


def prepare_scenario_document(payload: Any, mode: str = LENIENT) -> Any:
    document = migrate_scenario_document(payload)
    validate_document(document, "scenario_set", mode=mode)
    return document


def select_client(clients: list[Any], client_id: Any = None) -> dict[str, Any] | None:
    candidates = [client for client in clients if isinstance(client, dict)]
    if not candidates:
        return None

    if client_id is not None:
        wanted = str(client_id)
        for client in candidates:
            if str(client.get("id")) == wanted:
                return client
        raise ScenarioNotFoundError(f"No client with id {client_id!r}")

    for client in candidates:
        if as_mapping(client.get("profile")).get("isActive"):
            return client
    return candidates[0]


def extract_client_scenarios(document: Any, client_id: Any = None) -> list[Any]:
    """
    Return the raw scenario list a comparison should run over.

    Client backups yield the named client's scenarios, else the active
    client's, else the first client's. Direct documents yield their own list.
    """
    document = as_mapping(document)
    clients = document.get("clients")
    if isinstance(clients, list):
        client = select_client(clients, client_id)
        if client is None:
            return []
        scenarios = client.get("scenarios")
        logger.debug("Using scenarios of client %r", client.get("id"))
        return scenarios if isinstance(scenarios, list) else []

    if client_id is not None:
        raise ScenarioNotFoundError(f"Document has no clients; cannot select client {client_id!r}")
    scenarios = document.get("scenarios")
    return scenarios if isinstance(scenarios, list) else []


def client_labels(document: Any) -> list[tuple[str, str]]:
    """(id, display name) pairs for every client in a backup document."""
    clients = as_mapping(document).get("clients")
    if not isinstance(clients, list):
        return []
    labels = []
    for client in clients:
        if not isinstance(client, dict):
            continue
        profile = as_mapping(client.get("profile"))
        labels.append((str(client.get("id")), str(profile.get("clientName") or f"Client {client.get('id')}")))
    return labels
