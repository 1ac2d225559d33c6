from .commands import uninstall, update

__all__ = ["uninstall", "update"]
