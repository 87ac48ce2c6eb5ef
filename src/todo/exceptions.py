"""Todo domain exceptions.

All of these are expected, user-facing outcomes. Storage failures are not
wrapped and propagate as-is.
"""


class TodoError(Exception):
    """Base class for todo domain errors."""

    pass


class TodoNotFoundError(TodoError):
    """No record exists for the given id."""

    def __init__(self, todo_id: int):
        self.todo_id = todo_id
        super().__init__(f"Todo item not found with id: {todo_id}")


class TodoImmutableError(TodoError):
    """Mutation attempted on an item that is past due."""

    def __init__(self, todo_id: int):
        self.todo_id = todo_id
        super().__init__(
            f"Cannot modify todo item with id: {todo_id}. Item is past due and immutable."
        )


class InvalidTransitionError(TodoError, ValueError):
    """Requested status is not one a caller may set."""

    pass


class TodoConflictError(TodoError):
    """Concurrent writers kept changing the record; the update was not applied."""

    def __init__(self, todo_id: int, attempts: int):
        self.todo_id = todo_id
        self.attempts = attempts
        super().__init__(
            f"Todo item with id: {todo_id} was modified concurrently ({attempts} attempts)"
        )


class TodoValidationError(TodoError, ValueError):
    """Caller-supplied field value is not acceptable (e.g. a blank description)."""

    pass
