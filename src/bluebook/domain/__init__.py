"""Domain layer for bluebook application.

Services are loaded lazily because they depend on the database layer,
which itself imports domain entities.
"""

_SERVICES = {
    "AccountService": "bluebook.domain.account",
    "JournalService": "bluebook.domain.journal",
    "FixedAssetService": "bluebook.domain.fixed_asset",
    "ReportService": "bluebook.domain.reports",
    "DataTransferService": "bluebook.domain.data_transfer",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
