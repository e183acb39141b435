from copynfc.core.base.dispatch import Dispatcher, handles

__all__ = ["Dispatcher", "handles"]
