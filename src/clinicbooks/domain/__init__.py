"""Domain layer for clinicbooks application."""

# Services are resolved lazily so that the database layer can import
# clinicbooks.domain.entities without pulling the services back in.
_SERVICES = {
    "CatalogService": "clinicbooks.domain.catalog",
    "RecordService": "clinicbooks.domain.records",
    "JournalService": "clinicbooks.domain.journal_service",
    "JournalView": "clinicbooks.domain.journal_service",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
