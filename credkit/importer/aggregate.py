"""
Discovery Aggregator

Runs an ordered list of importers and unions their results.
"""

from .base import ImportAttempt, ImportInput, Importer
from ..errors import MalformedSourceError, format_error_context


class TryAll(Importer):
    """Runs every importer in order and collects all of their candidates.

    This is a union, not a first-match search: later importers run even
    when earlier ones found candidates. Errors are accumulated, never
    raised; an importer that blows up is recorded as a malformed source
    and its siblings still run.
    """

    name = "try_all"

    def __init__(self, *importers: Importer):
        super().__init__()
        self.importers = list(importers)

    def description(self) -> str:
        return f"try_all({len(self.importers)} importers)"

    def discover(self, import_input: ImportInput) -> ImportAttempt:
        attempt = ImportAttempt()

        for importer in self.importers:
            try:
                result = importer.discover(import_input)
            except Exception as e:
                self.logger.error("Importer failed",
                                importer=importer.description(),
                                **format_error_context(e))
                attempt.add_error(MalformedSourceError(
                    f"Importer failed: {e}",
                    importer=importer.description()
                ))
                continue

            self.logger.debug("Importer finished",
                            importer=importer.description(),
                            candidates=len(result.candidates),
                            errors=len(result.errors))
            attempt.extend(result)

        return attempt
