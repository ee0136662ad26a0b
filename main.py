"""Main entry point for the medicine reminder."""

from medicine_reminder.main import run


if __name__ == "__main__":
    run()
