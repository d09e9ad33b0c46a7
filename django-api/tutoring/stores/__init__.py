from tutoring.stores.interfaces import StudentStore

__all__ = ["StudentStore"]
