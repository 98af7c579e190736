"""
Learned-state persistence.

Agent snapshots are a soft cache: the service works from in-memory state
and a failed read or write is logged and swallowed, never surfaced to the
caller. A failed load starts the agent empty.

Backends:
  null   no-op (tests, or when persistence is not wanted)
  file   one JSON file per agent, replaced atomically
  orm    AgentSnapshot row per agent plus one QValue row per Q-table cell
"""
import copy
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from django.conf import settings
from django.db import transaction

from screening.models import AgentSnapshot, QValue
from screening.services.errors import PersistenceError
from screening.services.q_table import KEY_SEPARATOR, SCHEMA_VERSION as Q_SCHEMA_VERSION

logger = logging.getLogger(__name__)


class PersistenceBackend(ABC):
    name = "base"

    def load(self, agent_type: str) -> dict | None:
        try:
            return self._load(agent_type)
        except Exception:
            logger.exception("Failed to load %s snapshot from %s backend; starting empty", agent_type, self.name)
            return None

    def save(self, agent_type: str, snapshot: dict) -> bool:
        try:
            self._save(agent_type, snapshot)
        except Exception:
            logger.exception("Failed to save %s snapshot to %s backend", agent_type, self.name)
            return False
        logger.debug("Saved %s snapshot to %s backend", agent_type, self.name)
        return True

    @abstractmethod
    def _load(self, agent_type: str) -> dict | None:
        ...

    @abstractmethod
    def _save(self, agent_type: str, snapshot: dict) -> None:
        ...


class NullPersistence(PersistenceBackend):
    name = "null"

    def _load(self, agent_type):
        return None

    def _save(self, agent_type, snapshot):
        pass


class JsonFilePersistence(PersistenceBackend):
    name = "file"

    def __init__(self, directory):
        self.directory = Path(directory)

    def path_for(self, agent_type: str) -> Path:
        return self.directory / f"{agent_type}.json"

    def _load(self, agent_type):
        path = self.path_for(agent_type)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                raise PersistenceError(f"{path} is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceError(f"{path} does not hold a snapshot object")
        return data

    def _save(self, agent_type, snapshot):
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(agent_type)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{agent_type}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(snapshot, fh)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class OrmPersistence(PersistenceBackend):
    """
    Q-table cells are stored as QValue rows so they can be inspected and
    queried like any other table; the rest of the snapshot is one JSON row.
    """

    name = "orm"

    def _load(self, agent_type):
        row = AgentSnapshot.objects.filter(agent_type=agent_type).first()
        if row is None:
            return None
        if not isinstance(row.payload, dict):
            raise PersistenceError(f"Snapshot row for {agent_type} does not hold an object")

        snapshot = copy.deepcopy(row.payload)
        q_rows = QValue.objects.filter(agent_type=agent_type)
        if q_rows.exists():
            cells, stats = {}, {}
            for q in q_rows:
                key = f"{q.state}{KEY_SEPARATOR}{q.action}"
                cells[key] = q.q_value
                if q.visit_count:
                    stats[key] = [q.visit_count, q.total_reward]
            model = snapshot.setdefault("model", {})
            if isinstance(model, dict):
                model["qTable"] = {"version": Q_SCHEMA_VERSION, "cells": cells, "stats": stats}
        return snapshot

    def _save(self, agent_type, snapshot):
        payload = copy.deepcopy(snapshot)
        model = payload.get("model") if isinstance(payload.get("model"), dict) else {}
        q_table = model.pop("qTable", None)

        with transaction.atomic():
            if q_table is not None:
                QValue.objects.filter(agent_type=agent_type).delete()
                QValue.objects.bulk_create(_q_value_rows(agent_type, q_table))
            AgentSnapshot.objects.update_or_create(agent_type=agent_type, defaults={"payload": payload})


def _q_value_rows(agent_type: str, q_table: dict):
    stats = q_table.get("stats") or {}
    rows = []
    for key, value in (q_table.get("cells") or {}).items():
        state, action = key.rsplit(KEY_SEPARATOR, 1)
        visits, total = stats.get(key, (0, 0.0))
        rows.append(QValue(
            agent_type=agent_type, state=state, action=action,
            q_value=value, visit_count=visits, total_reward=total,
        ))
    return rows


def build_persistence_backend(kind: str | None = None) -> PersistenceBackend:
    kind = (kind or getattr(settings, "AGENT_PERSISTENCE_BACKEND", "null")).lower()
    if kind == "orm":
        return OrmPersistence()
    if kind == "file":
        return JsonFilePersistence(settings.AGENT_SNAPSHOT_DIR)
    if kind != "null":
        logger.warning("Unknown AGENT_PERSISTENCE_BACKEND %r; learned state will not be persisted", kind)
    return NullPersistence()
