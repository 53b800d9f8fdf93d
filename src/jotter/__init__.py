"""
JotterXpress: quick notes from the terminal.

A personal note-taking tool that provides:
- One-line capture of text notes
- Tasks, contacts, ideas and reminders
- Per-day JSON storage under ~/.jotterxpress/notes
- An interactive list for browsing and editing
"""

__version__ = "0.1.0"
