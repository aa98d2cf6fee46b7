"""
Annotations file store.

One record per line in $HOME/.annotations:

    <created_at> <content>

Records are appended one at a time; deletions are persisted by rewriting the
whole file from the in-memory collection.
"""

import os
from pathlib import Path

from annotate.annotation import Annotation
from annotate.config import load_config
from annotate.errors import CorruptStoreError, HomeNotSetError, ParseError
from annotate.log import debug

DEFAULT_FILENAME = ".annotations"


def resolve_path(environ=None, filename: str = DEFAULT_FILENAME) -> Path:
    """Return the annotations file location: $HOME/<filename>."""
    if environ is None:
        environ = os.environ
    home = environ.get("HOME")
    if not home:
        raise HomeNotSetError("Failed to get the home directory: HOME is not set")
    return Path(home) / filename


class AnnotationStore:
    """
    Flat-file store for annotations.

    Loading is all-or-nothing: a single malformed line aborts it.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def from_environment(cls, environ=None, config: dict | None = None) -> "AnnotationStore":
        """Build a store for the file named in config under $HOME."""
        if config is None:
            config = load_config(environ)
        filename = config.get("store", {}).get("filename", DEFAULT_FILENAME)
        return cls(resolve_path(environ, filename))

    def load(self) -> list[Annotation]:
        """Read every record in file order, creating an empty file if absent."""
        if not self.path.exists():
            debug(f"creating {self.path}")
            self.path.touch()
            return []

        data = self.path.read_bytes()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            lineno = data.count(b"\n", 0, e.start) + 1
            raise CorruptStoreError(self.path, lineno, e) from e
        text = text.replace("\r\n", "\n").replace("\r", "\n")

        annotations = []
        for lineno, line in enumerate(text.split("\n"), start=1):
            if not line:
                continue
            try:
                annotations.append(Annotation.parse(line))
            except ParseError as e:
                raise CorruptStoreError(self.path, lineno, e) from e

        debug(f"loaded {len(annotations)} annotations from {self.path}")
        return annotations

    def append(self, content: str, now: int | None = None) -> Annotation:
        """Append one annotation stamped with the current time.

        OSError from opening or writing the file propagates to the caller.
        """
        annotation = Annotation.new(content, now=now)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(annotation.serialize() + "\n")
            f.flush()
        debug(f"appended {annotation} to {self.path}")
        return annotation

    def save(self, annotations: list[Annotation]):
        """Overwrite the file with exactly these records."""
        with open(self.path, "w", encoding="utf-8") as f:
            for annotation in annotations:
                f.write(annotation.serialize() + "\n")
        debug(f"saved {len(annotations)} annotations to {self.path}")
