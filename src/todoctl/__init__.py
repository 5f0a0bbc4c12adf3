"""todoctl: personal task manager with recurring tasks and reminders."""

__version__ = "0.1.0"
