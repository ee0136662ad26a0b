"""Telegram front end for the medicine reminder."""
