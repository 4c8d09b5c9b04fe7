MAX_TITLE_LENGTH = 200


def is_valid_task_title(title: str) -> bool:
    return isinstance(title, str) and 1 <= len(title.strip()) <= MAX_TITLE_LENGTH


def clean_title(title: str) -> str:
    """Очищенное название задачи или ValueError"""
    if not is_valid_task_title(title):
        raise ValueError(f"Название должно быть от 1 до {MAX_TITLE_LENGTH} символов")
    return title.strip()
