import logging
import os
from enum import Enum
from pathlib import Path
from typing import Generic, List, Optional, Sequence, TypeVar, Union

from filelock import FileLock, Timeout

from .codec import RecordCodec
from .exceptions import MalformedRecordError, StorageUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT_SECONDS = 10.0

T = TypeVar("T")


class MalformedLinePolicy(str, Enum):
    """What a store does with a line it cannot decode."""
    SKIP = "skip"
    REPORT = "report"
    FAIL = "fail"


class CollectionStore(Generic[T]):
    """One entity collection persisted as a delimited text file.

    Every call goes back to the file; nothing is cached between operations.
    """

    def __init__(self, path: Union[str, Path], codec: RecordCodec,
                 malformed_policy: MalformedLinePolicy = MalformedLinePolicy.SKIP,
                 lock_timeout: float = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self.path = Path(path)
        self.codec = codec
        self.malformed_policy = MalformedLinePolicy(malformed_policy)
        self.lock_timeout = lock_timeout

    def _lock(self) -> FileLock:
        return FileLock(str(self.path) + ".lock", timeout=self.lock_timeout)

    def ensure_exists(self) -> None:
        """Create the backing file (and its directory) empty if missing."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.path.touch()
                logger.info("Created empty data file %s", self.path)
        except OSError as e:
            logger.warning("Could not create data file %s: %s", self.path, e)

    def _read_lines(self) -> List[str]:
        if not self.path.exists():
            raise StorageUnavailableError(str(self.path), "file does not exist")
        try:
            with self._lock():
                with open(self.path, "r", encoding="utf-8", newline="") as f:
                    text = f.read()
        except (OSError, UnicodeDecodeError, Timeout) as e:
            raise StorageUnavailableError(str(self.path), str(e)) from e
        # Only LF separates records; escaped fields never contain a raw one
        return text.split("\n")

    def load_all(self) -> List[T]:
        """Load every decodable record in file order."""
        try:
            lines = self._read_lines()
        except StorageUnavailableError as e:
            logger.error("%s; treating collection as empty", e)
            return []

        entities = []
        for line_number, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r")
            if not line.strip():
                continue
            entity = self.codec.decode(line)
            if entity is None:
                self._handle_malformed(line_number, line)
                continue
            entities.append(entity)
        return entities

    def _handle_malformed(self, line_number: int, line: str) -> None:
        if self.malformed_policy == MalformedLinePolicy.FAIL:
            raise MalformedRecordError(str(self.path), line_number, line)
        if self.malformed_policy == MalformedLinePolicy.REPORT:
            logger.warning("Skipping malformed line %d in %s: %r",
                           line_number, self.path, line)

    def save_all(self, entities: Sequence[T]) -> bool:
        """Overwrite the file with the given records.

        Returns False (after logging) if the file could not be written.
        """
        content = "".join(self.codec.encode(entity) + "\n" for entity in entities)
        temp_file = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock():
                with open(temp_file, "w", encoding="utf-8", newline="") as f:
                    f.write(content)
                os.replace(temp_file, self.path)
        except (OSError, Timeout) as e:
            logger.error("Error writing %s: %s", self.path, e)
            try:
                temp_file.unlink()
            except OSError:
                pass
            return False

        logger.debug("Saved %d records to %s", len(entities), self.path)
        return True

    def next_id(self) -> int:
        """Return 1 + the highest id currently stored, or 1 if empty."""
        return max((entity.id for entity in self.load_all()), default=0) + 1

    def find_by_id(self, entity_id: int) -> Optional[T]:
        for entity in self.load_all():
            if entity.id == entity_id:
                return entity
        return None
