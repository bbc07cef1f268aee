"""SmartCity identity and admin services."""

__version__ = "0.1.0"
