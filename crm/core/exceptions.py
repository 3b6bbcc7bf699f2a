"""CRM exceptions."""

from typing import Optional


class CRMError(Exception):
    """
    Structured exception for CRM operations.

    Usage:
        try:
            task_manager.complete_task(task_id)
        except CRMError as e:
            if e.code == "TASK_NOT_FOUND":
                handle_not_found()
    """

    _default_messages = {
        "CUSTOMER_NOT_FOUND": "Customer not found",
        "TASK_NOT_FOUND": "Task not found",
        "COMMUNICATION_NOT_FOUND": "Communication not found",
        "VALIDATION_ERROR": "Invalid input",
        "INVALID_DATE": "Invalid date format",
    }

    def __init__(self, code: str, message: Optional[str] = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self):
        return self.message
