from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .errors import CatalogError
from .schemas import Catalog, Category
from .settings import PACKAGE_DIR

logger = logging.getLogger(__name__)

SEED_PATH = PACKAGE_DIR / "data" / "seed_questions.json"


def utc_timestamp() -> str:
	"""ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T10:20:30.123Z."""
	return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def load_seed() -> Dict[str, Any]:
	data = json.loads(SEED_PATH.read_text(encoding="utf-8"))
	data["createdAt"] = utc_timestamp()
	return data


class QuestionCatalog:
	"""Read-only view over the catalog document on disk.

	The file is re-read on every call so edits to it are picked up without a
	restart; there is no write path besides the first-run seed.
	"""

	def __init__(self, path: Path) -> None:
		self.path = Path(path)

	def initialize(self) -> bool:
		"""Write the built-in seed if no catalog exists yet. Returns True when seeded."""
		if self.path.exists():
			logger.info("Questions file already exists: %s", self.path)
			return False
		self.path.parent.mkdir(parents=True, exist_ok=True)
		self.path.write_text(json.dumps(load_seed(), indent=2), encoding="utf-8")
		logger.info("Created %s from seed data", self.path)
		return True

	def load(self) -> Catalog:
		try:
			raw = json.loads(self.path.read_text(encoding="utf-8"))
			return Catalog.model_validate(raw)
		except (OSError, ValueError, ValidationError) as exc:
			raise CatalogError(f"Failed to read catalog {self.path}: {exc}") from exc

	def get_category(self, category_id: str) -> Optional[Category]:
		return self.load().category(category_id)
