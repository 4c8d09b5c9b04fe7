# database/json_store.py

import asyncio
import copy
import json
import logging
import shutil
import threading
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from database.errors import StoreCorruptionError, StoreWriteError
from database.store import (
    Direction,
    Document,
    DocumentStore,
    Write,
    apply_write,
    order_documents,
)
from database.paths import split_path

logger = logging.getLogger(__name__)


class JsonDocumentStore(DocumentStore):
    """
    Хранилище документов в одном JSON файле

    Возможности:
    - Кэш всех документов в памяти
    - Атомарное сохранение через временный файл
    - Бэкап при запуске и ротация старых бэкапов
    - Перемещение поврежденного файла в бэкапы
    """

    def __init__(self, data_file: Path, backup_dir: Path, max_backups: int = 10):
        self.data_file = Path(data_file)
        self.backup_dir = Path(backup_dir)
        self.max_backups = max_backups

        self._documents: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()
        # Писатели и файл данных
        self._save_lock = threading.Lock()

        # Метрики и состояние
        self.last_save_time: Optional[float] = None
        self.total_operations = 0
        self.failed_operations = 0

        self._initialize()

    def _initialize(self):
        """Инициализация хранилища"""
        logger.info("🔧 Инициализация JsonDocumentStore...")
        self.data_file.parent.mkdir(exist_ok=True, parents=True)
        self.backup_dir.mkdir(exist_ok=True, parents=True)

        self._load_all()
        if self.data_file.exists():
            self.create_backup()
            self.cleanup_old_backups()

        logger.info(f"✅ JsonDocumentStore инициализирован. Документов: {len(self._documents)}")

    def _load_all(self):
        """Загрузка всех документов из файла"""
        if not self.data_file.exists():
            logger.info("📂 Файл данных не найден, начинаем с пустого хранилища")
            self._documents = {}
            return

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise StoreCorruptionError("Корневой элемент файла данных не является объектом")
        except (json.JSONDecodeError, StoreCorruptionError) as e:
            logger.error(f"❌ Ошибка чтения файла данных: {e}")
            self._quarantine_corrupted()
            self._documents = {}
            return

        with self._lock:
            self._documents = {path: doc for path, doc in data.items() if isinstance(doc, dict)}
        logger.info(f"📂 Загружено {len(self._documents)} документов из {self.data_file}")

    def _quarantine_corrupted(self):
        """Перемещение поврежденного файла в бэкапы"""
        backup_name = f"corrupted_backup_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
        backup_path = self.backup_dir / backup_name
        self.data_file.replace(backup_path)
        logger.warning(f"🔄 Поврежденный файл перемещен в {backup_path}")

    # ===== ЧТЕНИЕ =====

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
            found = [
                Document(path=doc_path, id=doc_path[len(prefix):], data=copy.deepcopy(data))
                for doc_path, data in self._documents.items()
                if doc_path.startswith(prefix) and "/" not in doc_path[len(prefix):]
            ]

        result = order_documents(found, order_by, direction)
        return result[:limit] if limit is not None else result

    # ===== ЗАПИСЬ =====

    async def _apply_writes(self, writes: List[Write]) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._apply_and_save, writes)

    def _apply_and_save(self, writes: List[Write]) -> None:
        """
        Применить записи к копии, сохранить файл и только затем обновить кэш

        _save_lock упорядочивает писателей. _lock держится только на время
        копирования и подмены кэша, не во время записи файла.
        """
        with self._save_lock:
            with self._lock:
                self.total_operations += 1
                staged = copy.deepcopy(self._documents)
            try:
                for write in writes:
                    apply_write(staged, write)
                self._save_to_disk(staged)
            except Exception as e:
                self.failed_operations += 1
                logger.error(f"❌ Ошибка сохранения данных: {e}")
                raise StoreWriteError(str(e)) from e
            with self._lock:
                self._documents = staged

    def _save_to_disk(self, documents: Dict[str, Dict[str, Any]]):
        """Атомарное сохранение через временный файл"""
        start_time = time.time()
        self._write_file(json.dumps(documents, ensure_ascii=False, indent=2))
        self.last_save_time = time.time()
        logger.debug(f"💾 Данные сохранены за {self.last_save_time - start_time:.3f}с")

    def _write_file(self, payload: str):
        temp_file = self.data_file.with_suffix(".tmp")
        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(payload)
        temp_file.replace(self.data_file)

    # ===== БЭКАПЫ =====

    def create_backup(self, backup_name: str = None) -> Optional[Path]:
        """Создание бэкапа файла данных"""
        if not self.data_file.exists():
            logger.warning("⚠️ Нет файла данных для создания бэкапа")
            return None

        if not backup_name:
            backup_name = f"backup_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.json"
        backup_path = self.backup_dir / backup_name
        with self._save_lock:
            shutil.copy2(self.data_file, backup_path)
        logger.info(f"💾 Бэкап создан: {backup_path}")
        return backup_path

    def cleanup_old_backups(self, keep_count: int = None) -> int:
        """Удаление старых бэкапов, возвращает число удаленных"""
        if keep_count is None:
            keep_count = self.max_backups

        backups = sorted(self.backup_dir.glob("backup_*.json"), key=lambda p: p.stat().st_mtime)
        if len(backups) <= keep_count:
            return 0

        to_delete = backups[:-keep_count] if keep_count > 0 else backups
        for backup in to_delete:
            backup.unlink()
        logger.info(f"🗑️ Удалено {len(to_delete)} старых бэкапов")
        return len(to_delete)

    # ===== СЕРВИСНЫЕ МЕТОДЫ =====

    def health_check(self) -> Dict[str, Any]:
        """Проверка состояния хранилища"""
        error_rate = (self.failed_operations / max(self.total_operations, 1)) * 100
        status = "ok" if error_rate < 5 else "warning" if error_rate < 10 else "error"
        with self._lock:
            count = len(self._documents)
        return {
            "status": status,
            "backend": "json",
            "data_file": str(self.data_file),
            "data_file_exists": self.data_file.exists(),
            "documents": count,
            "total_operations": self.total_operations,
            "failed_operations": self.failed_operations,
            "last_save_time": self.last_save_time,
            "timestamp": datetime.now().isoformat(),
        }

    async def close(self):
        """Корректное закрытие хранилища"""
        logger.info("🛑 Закрытие JsonDocumentStore...")
        with self._save_lock:
            with self._lock:
                documents = self._documents
            if documents:
                self._save_to_disk(documents)
        logger.info("✅ JsonDocumentStore закрыт")
