"""Poll product pages and send a one-time SMS when an item comes in stock."""

__all__ = [
    "bootstrap",
    "config",
    "models",
    "notify",
    "probe",
    "providers",
    "retailers",
    "settings",
    "watcher",
    "main",
]
