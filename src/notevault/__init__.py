"""
NoteVault Backend - Encrypted Note Taking and Sharing

Notes are encrypted at rest, shared with collaborators by email and
published read-only through unguessable share links.
"""

__version__ = "1.0.0"
