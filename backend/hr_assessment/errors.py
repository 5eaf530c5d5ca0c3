class CompletionError(RuntimeError):
	"""The completion service could not be reached or returned an unusable envelope."""


class StoreError(RuntimeError):
	"""The result store could not be read or written."""


class CatalogError(RuntimeError):
	"""The question catalog document is missing or corrupt."""
