"""Status bar configuration, label modules and layer-surface geometry."""

__version__ = "0.9.8"