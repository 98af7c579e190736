"""
Sparse Q-table keyed by (CandidateState, action).

Cells are created lazily: the first lookup of a (state, action) pair stores a
seed value derived from the state's representative composite score, so an
untrained table already prefers REJECT for weak profiles, CONSIDER for
middling ones and HIRE for strong ones.

The table serializes to a flat map {"<state>|<ACTION>": q_value} plus
per-cell visit statistics; deserialization drops anything it does not
recognise instead of failing.
"""
import logging
from dataclasses import dataclass

from screening.services.decisions import ACTIONS, CONSIDER, HIRE, REJECT
from screening.services.discretizer import CandidateState, parse_state, state_composite

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
KEY_SEPARATOR = "|"

# Midpoint of the CONSIDER band of the seed heuristic (normalized composite)
SEED_CONSIDER_CENTER = 0.6
SEED_CONSIDER_PEAK = 0.75


@dataclass
class QCell:
    value: float
    visit_count: int = 0
    total_reward: float = 0.0


def seed_values(state: CandidateState) -> dict[str, float]:
    """Heuristic prior for a state, from its representative composite score."""
    composite = state_composite(state)
    base = 0.5 if composite is None else composite / 100.0
    return {
        HIRE: round(base, 4),
        CONSIDER: round(SEED_CONSIDER_PEAK - abs(base - SEED_CONSIDER_CENTER), 4),
        REJECT: round(1.0 - base, 4),
    }


class QTable:
    def __init__(self):
        self._cells: dict[CandidateState, dict[str, QCell]] = {}

    # ─── Lookups ─────────────────────────────────────────────────────────────

    def get(self, state: CandidateState, action: str) -> float:
        return self._cell(state, action).value

    def values(self, state: CandidateState) -> dict[str, float]:
        return {action: self.get(state, action) for action in ACTIONS}

    def max_q(self, state: CandidateState) -> float:
        return max(self.values(state).values())

    def cell(self, state: CandidateState, action: str) -> QCell:
        return self._cell(state, action)

    def _cell(self, state: CandidateState, action: str) -> QCell:
        row = self._cells.setdefault(state, {})
        cell = row.get(action)
        if cell is None:
            cell = QCell(value=seed_values(state).get(action, 0.0))
            row[action] = cell
        return cell

    # ─── Mutation ────────────────────────────────────────────────────────────

    def update(self, state: CandidateState, action: str, value: float, reward: float | None = None):
        cell = self._cell(state, action)
        cell.value = float(value)
        if reward is not None:
            cell.visit_count += 1
            cell.total_reward += reward

    def clear(self):
        self._cells.clear()

    # ─── Introspection ───────────────────────────────────────────────────────

    def __len__(self) -> int:
        return sum(len(row) for row in self._cells.values())

    def __contains__(self, key) -> bool:
        state, action = key
        return action in self._cells.get(state, {})

    def state_count(self) -> int:
        return len(self._cells)

    def average_value(self) -> float:
        cells = [c.value for row in self._cells.values() for c in row.values()]
        return sum(cells) / len(cells) if cells else 0.0

    def items(self):
        for state, row in self._cells.items():
            for action, cell in row.items():
                yield state, action, cell

    # ─── Persistence ─────────────────────────────────────────────────────────

    def serialize(self) -> dict:
        cells = {}
        stats = {}
        for state, action, cell in self.items():
            key = f"{state}{KEY_SEPARATOR}{action}"
            cells[key] = cell.value
            if cell.visit_count:
                stats[key] = [cell.visit_count, cell.total_reward]
        return {"version": SCHEMA_VERSION, "cells": cells, "stats": stats}

    @classmethod
    def deserialize(cls, data) -> "QTable":
        table = cls()
        if not isinstance(data, dict):
            return table

        cells = data.get("cells")
        if not isinstance(cells, dict):
            return table
        stats = data.get("stats") if isinstance(data.get("stats"), dict) else {}

        dropped = 0
        for key, value in cells.items():
            parsed = _parse_key(key)
            if parsed is None or isinstance(value, bool) or not isinstance(value, (int, float)):
                dropped += 1
                continue
            state, action = parsed
            cell = QCell(value=float(value))
            stat = stats.get(key)
            if isinstance(stat, (list, tuple)) and len(stat) == 2:
                try:
                    cell.visit_count = int(stat[0])
                    cell.total_reward = float(stat[1])
                except (TypeError, ValueError):
                    pass
            table._cells.setdefault(state, {})[action] = cell

        if dropped:
            logger.warning("Dropped %d unrecognised Q-table entries while loading", dropped)
        return table


def _parse_key(key) -> tuple[str, str] | None:
    if not isinstance(key, str) or KEY_SEPARATOR not in key:
        return None
    state, action = key.rsplit(KEY_SEPARATOR, 1)
    if action not in ACTIONS or parse_state(state) is None:
        return None
    return state, action
