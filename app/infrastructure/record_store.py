"""Durable key-value persistence for whole JSON collections."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.infrastructure.models import StoredRecordModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EMPTY_PAYLOADS = frozenset({"", "undefined", "null"})
_OBJECT_PLACEHOLDERS = frozenset({"[object Object]", "object Object"})
_LOG_SAMPLE_LENGTH = 200


class RecordStoreError(RuntimeError):
    """Raised when a record cannot be written to or removed from the store."""


class CorruptedRecordError(ValueError):
    """Raised internally when a stored payload cannot be interpreted."""


@dataclass
class RepairReport:
    """Summary of a storage validation pass."""

    checked: int = 0
    removed: list[str] = field(default_factory=list)


class RecordStore:
    """Load and save whole values under string keys.

    Every ``save`` replaces the complete value stored under a key inside a
    single transaction. ``load`` never raises on malformed payloads: the
    corrupted row is erased and the caller-supplied default is returned.
    """

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def load(
        self,
        key: str,
        default: T,
        *,
        decoder: Callable[[Any], T] | None = None,
    ) -> T:
        """Return the value stored under ``key`` or ``default``.

        ``decoder`` converts the parsed JSON into the caller's type; if it
        raises ``ValueError``, ``KeyError`` or ``TypeError`` the record is
        treated as corrupted.
        """

        try:
            raw = self._read_payload(key)
        except SQLAlchemyError:
            logger.exception("Failed to read record '%s'; using default value", key)
            return default

        if raw is None:
            return default

        text = raw.strip()
        if text in _EMPTY_PAYLOADS:
            return default

        try:
            value = _parse_payload(text)
            if decoder is not None:
                value = decoder(value)
        except (ValueError, KeyError, TypeError) as exc:
            logger.error(
                "Discarding corrupted record '%s' (%d chars): %s. Sample: %s",
                key,
                len(text),
                exc,
                text[:_LOG_SAMPLE_LENGTH],
            )
            self._erase_quietly(key)
            return default
        return value

    def save(self, key: str, value: Any) -> None:
        """Replace the value stored under ``key`` with ``value``."""

        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise RecordStoreError(f"Cannot serialize record '{key}'") from exc

        session = self._session_factory()
        try:
            model = session.get(StoredRecordModel, key)
            if model is None:
                session.add(StoredRecordModel(key=key, payload=payload))
            else:
                model.payload = payload
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to persist record '%s': %s", key, exc)
            raise RecordStoreError(f"Failed to persist record '{key}'") from exc
        finally:
            session.close()

    def erase(self, key: str) -> None:
        """Remove ``key`` from the store if present."""

        session = self._session_factory()
        try:
            model = session.get(StoredRecordModel, key)
            if model is not None:
                session.delete(model)
                session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Failed to erase record '%s': %s", key, exc)
            raise RecordStoreError(f"Failed to erase record '{key}'") from exc
        finally:
            session.close()

    def keys(self) -> list[str]:
        """Return every key currently stored."""

        with self._session_factory() as session:
            return list(session.scalars(select(StoredRecordModel.key)))

    def repair(self) -> RepairReport:
        """Scan every stored record and remove the ones that cannot be parsed."""

        report = RepairReport()
        for key in self.keys():
            report.checked += 1
            try:
                raw = self._read_payload(key)
            except SQLAlchemyError:
                logger.exception("Error validating record '%s'", key)
                continue
            text = (raw or "").strip()
            try:
                if text in _EMPTY_PAYLOADS:
                    raise CorruptedRecordError("empty payload")
                _parse_payload(text)
            except ValueError as exc:
                logger.warning("Removing invalid record '%s': %s", key, exc)
                try:
                    self.erase(key)
                except RecordStoreError:
                    logger.error("Invalid record '%s' could not be removed", key)
                    continue
                report.removed.append(key)

        if report.removed:
            logger.info(
                "Storage validation complete: removed %d of %d records",
                len(report.removed),
                report.checked,
            )
        else:
            logger.info("Storage validation complete: all %d records OK", report.checked)
        return report

    def _read_payload(self, key: str) -> str | None:
        with self._session_factory() as session:
            model = session.get(StoredRecordModel, key)
            return model.payload if model is not None else None

    def _erase_quietly(self, key: str) -> None:
        try:
            self.erase(key)
        except RecordStoreError:
            logger.warning("Corrupted record '%s' could not be erased", key)


def _parse_payload(text: str) -> Any:
    if text in _OBJECT_PLACEHOLDERS:
        raise CorruptedRecordError("stringified object placeholder stored as payload")
    return json.loads(text)


__all__ = ["RecordStore", "RecordStoreError", "RepairReport"]
