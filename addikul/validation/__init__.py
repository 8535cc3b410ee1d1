from .data_checks import ReplayDataError, validate_batch

__all__ = ["ReplayDataError", "validate_batch"]
