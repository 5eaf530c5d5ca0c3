"""Append-only result storage.

Results are never updated or deleted. Two backends share one interface: a
JSON array file (the default) and a SQL table for deployments that set
DATABASE_URL. Both serialize writers inside the process, so concurrent
submissions cannot lose each other's appends, and both assign ids.
"""
from __future__ import annotations
import json
import logging
import os
import tempfile
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .db import init_db, make_session_factory
from .errors import StoreError
from .models import AssessmentResultRow

logger = logging.getLogger(__name__)

_path_locks: Dict[str, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
	key = str(path.resolve())
	with _path_locks_guard:
		return _path_locks.setdefault(key, threading.Lock())


def now_millis() -> int:
	return int(time.time() * 1000)


def next_result_id(taken: Iterable[str], clock: Callable[[], int] = now_millis) -> str:
	"""Millisecond epoch id, bumped forward until it is unused."""
	taken = set(taken)
	candidate = clock()
	while str(candidate) in taken:
		candidate += 1
	return str(candidate)


class ResultStore(ABC):
	@abstractmethod
	def initialize(self) -> None:
		...

	@abstractmethod
	def append(self, fields: Dict[str, Any]) -> Dict[str, Any]:
		"""Persist a new result and return it with its assigned ``id`` first."""

	@abstractmethod
	def list_results(self) -> List[Dict[str, Any]]:
		...

	def get(self, result_id: str) -> Optional[Dict[str, Any]]:
		for result in self.list_results():
			if result.get("id") == result_id:
				return result
		return None


class JsonFileResultStore(ResultStore):
	def __init__(self, path: Path, clock: Callable[[], int] = now_millis) -> None:
		self.path = Path(path)
		self.clock = clock

	def initialize(self) -> None:
		if self.path.exists():
			logger.info("Results file already exists: %s", self.path)
			return
		self.path.parent.mkdir(parents=True, exist_ok=True)
		self._write([])
		logger.info("Created empty results file: %s", self.path)

	def _read(self) -> List[Dict[str, Any]]:
		if not self.path.exists():
			return []
		try:
			data = json.loads(self.path.read_text(encoding="utf-8"))
		except (OSError, ValueError) as exc:
			raise StoreError(f"Failed to read results from {self.path}: {exc}") from exc
		if not isinstance(data, list):
			raise StoreError(f"Results file {self.path} does not hold a JSON array")
		if not all(isinstance(r, dict) for r in data):
			raise StoreError(f"Results file {self.path} holds a non-object entry")
		return data

	def _write(self, results: List[Dict[str, Any]]) -> None:
		# Write to a sibling temp file and swap it in so readers never see a partial file
		fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".results-", suffix=".json")
		try:
			with os.fdopen(fd, "w", encoding="utf-8") as f:
				json.dump(results, f, indent=2, allow_nan=False)
			os.replace(tmp, self.path)
		except (OSError, ValueError) as exc:
			try:
				os.unlink(tmp)
			except OSError:
				pass
			raise StoreError(f"Failed to write results to {self.path}: {exc}") from exc

	def append(self, fields: Dict[str, Any]) -> Dict[str, Any]:
		with _lock_for(self.path):
			results = self._read()
			result_id = next_result_id((r.get("id") for r in results), self.clock)
			record = {"id": result_id, **fields}
			results.append(record)
			self._write(results)
		return record

	def list_results(self) -> List[Dict[str, Any]]:
		return self._read()


class SqlResultStore(ResultStore):
	def __init__(self, engine: Engine, clock: Callable[[], int] = now_millis) -> None:
		self.engine = engine
		self.session_factory = make_session_factory(engine)
		self.clock = clock
		self._lock = threading.Lock()

	def initialize(self) -> None:
		init_db(self.engine)

	def append(self, fields: Dict[str, Any]) -> Dict[str, Any]:
		with self._lock:
			db: Session = self.session_factory()
			try:
				candidate = self.clock()
				while db.query(AssessmentResultRow.seq).filter(AssessmentResultRow.id == str(candidate)).first():
					candidate += 1
				record = {"id": str(candidate), **fields}
				db.add(AssessmentResultRow(
					id=record["id"],
					organization_name=record.get("organizationName", ""),
					submitted_at=record.get("submittedAt", ""),
					payload=json.dumps(record, allow_nan=False),
				))
				db.commit()
			except (SQLAlchemyError, ValueError) as exc:
				db.rollback()
				raise StoreError(f"Failed to store result: {exc}") from exc
			finally:
				db.close()
		return record

	def list_results(self) -> List[Dict[str, Any]]:
		db: Session = self.session_factory()
		try:
			rows = db.query(AssessmentResultRow).order_by(AssessmentResultRow.seq).all()
			return [json.loads(row.payload) for row in rows]
		except (SQLAlchemyError, ValueError) as exc:
			raise StoreError(f"Failed to read results: {exc}") from exc
		finally:
			db.close()

	def get(self, result_id: str) -> Optional[Dict[str, Any]]:
		db: Session = self.session_factory()
		try:
			row = db.query(AssessmentResultRow).filter(AssessmentResultRow.id == result_id).first()
			return json.loads(row.payload) if row else None
		except (SQLAlchemyError, ValueError) as exc:
			raise StoreError(f"Failed to read result {result_id}: {exc}") from exc
		finally:
			db.close()
