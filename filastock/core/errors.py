"""Error kinds raised by the inventory core.

Every error fails only the call that raised it. Ownership failures are raised
as ``NotFoundError`` so callers never learn whether another owner's record
exists.
"""


class InventoryError(Exception):
    """Base class for all inventory core errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(InventoryError):
    def __init__(self, entity: str, entity_id=None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class InvalidTransitionError(InventoryError):
    def __init__(self, action: str, current_status):
        self.action = action
        self.current_status = current_status
        super().__init__(f"Cannot {action} a unit that is {getattr(current_status, 'value', current_status)}")


class ReferencedEntityError(InventoryError):
    def __init__(self, entity: str, reference_count: int):
        self.entity = entity
        self.reference_count = reference_count
        super().__init__(f"Cannot delete {entity} with existing inventory units ({reference_count})")


class ValidationError(InventoryError):
    def __init__(self, message: str, field: str = None):
        self.field = field
        super().__init__(message)


class DuplicateError(InventoryError):
    pass
