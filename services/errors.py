# services/errors.py


class LedgerError(Exception):
    """Базовое исключение дневного журнала задач"""
    pass


class EntryNotFoundError(LedgerError):
    """Записи на эту дату нет"""

    def __init__(self, user_id: str, date: str):
        super().__init__(f"Запись пользователя {user_id} на {date} не найдена")
        self.user_id = user_id
        self.date = date


class TaskNotFoundError(LedgerError):
    """Задачи с таким id нет в записи"""

    def __init__(self, task_id: str, date: str):
        super().__init__(f"Задача {task_id} на {date} не найдена")
        self.task_id = task_id
        self.date = date


class RoutineNotFoundError(LedgerError):
    """Нет элемента рутины с таким индексом"""

    def __init__(self, routine: str, index: int):
        super().__init__(f"Элемент {index} в рутине {routine} не найден")
        self.routine = routine
        self.index = index


class InvalidDateError(LedgerError, ValueError):
    """Дата не подходит для операции"""

    def __init__(self, date: str, reason: str):
        super().__init__(f"Дата {date} недопустима: {reason}")
        self.date = date
        self.reason = reason
