"""NammaCompliance backend: GST reminders, compliance nagging and notification storage."""

__version__ = "1.0.0"
