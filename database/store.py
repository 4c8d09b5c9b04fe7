# database/store.py

import copy
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from database.errors import StoreWriteError
from database.paths import split_path

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass
class Document:
    """Документ хранилища: путь, id и поля"""
    path: str
    id: str
    data: Dict[str, Any]


# (путь, поля, merge)
Write = Tuple[str, Dict[str, Any], bool]


class WriteBatch:
    """
    Набор записей, применяемых одной операцией

    Либо применяются все записи, либо ни одна.
    """

    def __init__(self, store: "DocumentStore"):
        self._store = store
        self._writes: List[Write] = []
        self._committed = False

    def set(self, path: str, fields: Dict[str, Any], merge: bool = True) -> "WriteBatch":
        if self._committed:
            raise RuntimeError("Batch уже применен")
        split_path(path)
        self._writes.append((path, copy.deepcopy(fields), merge))
        return self

    def __len__(self) -> int:
        return len(self._writes)

    async def commit(self) -> None:
        if self._committed:
            raise RuntimeError("Batch уже применен")
        self._committed = True
        if self._writes:
            await self._store._apply_writes(self._writes)


def apply_write(documents: Dict[str, Dict[str, Any]], write: Write) -> None:
    """Применить одну запись к словарю документов"""
    path, fields, merge = write
    if merge and path in documents:
        documents[path].update(copy.deepcopy(fields))
    else:
        documents[path] = copy.deepcopy(fields)


def order_documents(documents: List[Document], order_by: Optional[str],
                    direction: Direction) -> List[Document]:
    """Сортировка результатов запроса, документы без поля идут в конце"""
    if not order_by:
        return sorted(documents, key=lambda d: d.id)

    present = [d for d in documents if d.data.get(order_by) is not None]
    missing = [d for d in documents if d.data.get(order_by) is None]
    present.sort(key=lambda d: d.data[order_by], reverse=direction == Direction.DESCENDING)
    return present + sorted(missing, key=lambda d: d.id)


class DocumentStore(ABC):
    """
    Контракт хранилища документов

    Все записи по умолчанию выполняются как слияние полей: поля,
    которых нет в payload, не затираются.
    """

    @abstractmethod
    async def get_document(self, path: str) -> Optional[Document]:
        """Получить документ или None"""

    async def set_document(self, path: str, fields: Dict[str, Any], merge: bool = True) -> None:
        """Записать документ"""
        await self.batch().set(path, fields, merge).commit()

    @abstractmethod
    async def query_collection(self, path: str, order_by: Optional[str] = None,
                               direction: Direction = Direction.DESCENDING,
                               limit: Optional[int] = None) -> List[Document]:
        """Документы коллекции с сортировкой и лимитом"""

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    @abstractmethod
    async def _apply_writes(self, writes: List[Write]) -> None:
        """Атомарно применить набор записей"""

    async def close(self) -> None:
        pass

    def health_check(self) -> Dict[str, Any]:
        return {"status": "ok", "backend": type(self).__name__}


class MemoryDocumentStore(DocumentStore):
    """Хранилище в памяти процесса"""

    def __init__(self, documents: Optional[Dict[str, Dict[str, Any]]] = None):
        self._documents: Dict[str, Dict[str, Any]] = copy.deepcopy(documents or {})
        self._lock = threading.RLock()
        self.total_operations = 0
        self.failed_operations = 0

    async def get_document(self, path: str) -> Optional[Document]:
        _, doc_id = split_path(path)
        with self._lock:
            self.total_operations += 1
            data = self._documents.get(path)
            if data is None:
                return None
            return Document(path=path, id=doc_id, data=copy.deepcopy(data))

    async def query_collection(self, path: str, order_by: Optional[str] = None,
                               direction: Direction = Direction.DESCENDING,
                               limit: Optional[int] = None) -> List[Document]:
        prefix = path.strip("/") + "/"
        with self._lock:
            self.total_operations += 1
            found = []
            for doc_path, data in self._documents.items():
                if not doc_path.startswith(prefix):
                    continue
                doc_id = doc_path[len(prefix):]
                if "/" in doc_id:
                    continue
                found.append(Document(path=doc_path, id=doc_id, data=copy.deepcopy(data)))

        result = order_documents(found, order_by, direction)
        return result[:limit] if limit is not None else result

    async def _apply_writes(self, writes: List[Write]) -> None:
        with self._lock:
            self.total_operations += 1
            staged = {path: copy.deepcopy(self._documents[path])
                      for path, _, _ in writes if path in self._documents}
            try:
                for write in writes:
                    apply_write(staged, write)
            except Exception as e:
                self.failed_operations += 1
                logger.error(f"❌ Ошибка применения записей: {e}")
                raise StoreWriteError(str(e)) from e
            self._documents.update(staged)
        logger.debug(f"💾 Применено записей: {len(writes)}")

    def dump(self) -> Dict[str, Dict[str, Any]]:
        """Снимок всех документов"""
        with self._lock:
            return copy.deepcopy(self._documents)

    def health_check(self) -> Dict[str, Any]:
        with self._lock:
            count = len(self._documents)
        return {
            "status": "ok",
            "backend": "memory",
            "documents": count,
            "total_operations": self.total_operations,
            "failed_operations": self.failed_operations,
            "timestamp": datetime.now().isoformat(),
        }
