"""Saves and restores the versioned game document as a local JSON file."""

import json
import logging

from .constants import DEFAULT_STORAGE_FILE, STORAGE_VERSION
from .engine import GameEngine

logger = logging.getLogger(__name__)


def default_document():
    """The document of a fresh install: no game, default settings and stats."""
    return GameEngine().to_document()


class GameStorage:
    def __init__(self, filename=DEFAULT_STORAGE_FILE):
        self.filename = filename

    def load(self):
        """
        Reads the stored document. Anything unreadable, or written under a
        different schema version, is replaced by the default document. No
        field-by-field migration is attempted.
        """
        try:
            with open(self.filename, 'r') as f:
                document = json.load(f)
        except FileNotFoundError:
            return default_document()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Discarding unreadable storage file %s: %s", self.filename, exc)
            return default_document()

        version = document.get('version') if isinstance(document, dict) else None
        # Newer versions are discarded too: their layout is unknown to this release
        if version != STORAGE_VERSION:
            logger.warning("Discarding storage version %s (current is %s)", version, STORAGE_VERSION)
            return default_document()
        return document

    def save(self, document):
        try:
            with open(self.filename, 'w') as f:
                json.dump(document, f, indent=2)
        except OSError as exc:
            logger.warning("Could not save storage file %s: %s", self.filename, exc)

    def save_engine(self, engine):
        self.save(engine.to_document())

    def restore_engine(self, provider=None):
        """Loads the document into a new engine, falling back to defaults if it is malformed."""
        document = self.load()
        try:
            return GameEngine.from_document(document, provider=provider)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Discarding malformed storage document: %s", exc)
            return GameEngine.from_document(default_document(), provider=provider)
