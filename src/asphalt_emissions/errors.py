"""Fatal pipeline errors. Anything raised from here aborts the run with exit code 1."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for errors that abort the whole choropleth run."""


class ConfigError(PipelineError):
    """A settings value has the wrong type or an unusable value."""


class OutputDirectoryError(PipelineError):
    """A data or plots directory could not be created or written."""


class DownloadError(PipelineError):
    """A remote file could not be fetched (bad status, connection error, timeout)."""


class InventoryReadError(PipelineError):
    """The emissions workbook is missing, unreadable, or not laid out as expected."""


class SheetNotFoundError(InventoryReadError):
    """The requested sheet does not exist in the workbook."""

    def __init__(self, sheet: str, available: list[str]):
        self.sheet = sheet
        self.available = available
        super().__init__(f"Sheet '{sheet}' not found. Available sheets: {', '.join(available) or '(none)'}")


class GeographyError(PipelineError):
    """The state boundary layer is missing or unreadable."""


class EmptyDatasetError(PipelineError):
    """No emissions values survived cleaning and joining."""


class RenderError(PipelineError):
    """The map image could not be written."""
