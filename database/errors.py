# database/errors.py


class StoreError(Exception):
    """Базовое исключение хранилища документов"""
    pass


class StoreWriteError(StoreError):
    """Запись в хранилище не удалась, изменения не применены"""
    pass


class StoreCorruptionError(StoreError):
    """Файл хранилища поврежден"""
    pass
