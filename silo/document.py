from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from .errors import DuplicatePath
from .pathutil import validate_path


@dataclass
class Record:
    path: str  # forward-slash relative path
    content: str


@dataclass
class Document:
    """An ordered set of records plus the delimiter used to frame them.

    delimiter is None until a writer resolves it; parsing fixes it to the
    token found on the first declaration line.
    """

    delimiter: Optional[str] = None
    records: List[Record] = field(default_factory=list)
    _index: Dict[str, Record] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for rec in self.records:
            if rec.path in self._index:
                raise DuplicatePath(rec.path)
            self._index[rec.path] = rec

    def add(self, path: str, content: str, *, line: Optional[int] = None) -> Record:
        validate_path(path, line)
        if path in self._index:
            raise DuplicatePath(path, line)
        rec = Record(path, content)
        self.records.append(rec)
        self._index[path] = rec
        return rec

    def get(self, path: str) -> Optional[Record]:
        return self._index.get(path)

    def paths(self) -> List[str]:
        return [r.path for r in self.records]

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)
