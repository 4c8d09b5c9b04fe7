# database/paths.py

"""Раскладка документов: users/{uid} и users/{uid}/entries/{YYYY-MM-DD}"""

USERS_COLLECTION = "users"
ENTRIES_COLLECTION = "entries"


def _segment(value: str, name: str) -> str:
    value = str(value).strip()
    if not value or "/" in value:
        raise ValueError(f"Недопустимое значение {name}: {value!r}")
    return value


def user_path(user_id: str) -> str:
    return f"{USERS_COLLECTION}/{_segment(user_id, 'user_id')}"


def entries_collection(user_id: str) -> str:
    return f"{user_path(user_id)}/{ENTRIES_COLLECTION}"


def entry_path(user_id: str, date: str) -> str:
    return f"{entries_collection(user_id)}/{_segment(date, 'date')}"


def split_path(path: str):
    """Разделить путь документа на (коллекция, id)"""
    parts = path.strip("/").split("/")
    if len(parts) < 2 or len(parts) % 2:
        raise ValueError(f"Путь не указывает на документ: {path!r}")
    return "/".join(parts[:-1]), parts[-1]
