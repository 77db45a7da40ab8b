"""Chat-bot building blocks: reminders, group management helpers, MIDI notes and web lookups."""

__version__ = "0.1.0"