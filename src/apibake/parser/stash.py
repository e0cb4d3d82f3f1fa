"""Accumulator for component schemas shared by several input files."""


class SchemaStash:
    """Collects schemas across parse() calls; the first definition of a name wins."""

    def __init__(self):
        self._schemas: dict = {}

    def stash(self, schemas: dict) -> list[str]:
        """Add schemas that are not known yet. Returns the names that were dropped."""
        duplicates = []
        for name, schema in schemas.items():
            if name in self._schemas:
                duplicates.append(name)
            else:
                self._schemas[name] = schema
        return duplicates

    def flush_all(self) -> dict:
        schemas, self._schemas = self._schemas, {}
        return schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def __contains__(self, name: str) -> bool:
        return name in self._schemas
