class TaskCanvasError(Exception):
    """Base exception for all task engine errors."""
    pass

class RecoverableError(TaskCanvasError):
    """An error the caller can report and carry on from."""
    pass

class FatalError(TaskCanvasError):
    """An error that means the data in hand can no longer be trusted."""
    pass

class InvariantViolation(FatalError):
    """Depth, parent or id bookkeeping in a tree is inconsistent."""
    pass

class CorruptionError(FatalError):
    """Corrupted Data Error - from syntax errors in data formats, to documents that fail the schema"""
    pass

class MalformedInputError(RecoverableError):
    """Input was rejected before any tree mutation was attempted."""
    pass

class DragStateError(RecoverableError):
    """A drag gesture was driven through an illegal transition."""
    pass

class TemplateNotFoundError(RecoverableError):
    """No template matches the requested name."""
    pass

class FileOperationError(RecoverableError):
    """File operation failed but can be retried."""
    pass
