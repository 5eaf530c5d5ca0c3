from __future__ import annotations
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
	root = logging.getLogger("hr_assessment")
	root.setLevel(level.upper())
	# Only attach once; uvicorn reload and tests call this repeatedly
	if not root.handlers:
		handler = logging.StreamHandler(sys.stdout)
		handler.setFormatter(logging.Formatter(LOG_FORMAT))
		root.addHandler(handler)
	logging.getLogger("httpx").setLevel(logging.WARNING)
	return root
