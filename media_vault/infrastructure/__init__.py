"""Infrastructure adapters (database, storage backends)."""
