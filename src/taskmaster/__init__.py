"""TaskMaster: console task manager built on UI-agnostic page/dialog controllers."""

__version__ = "0.1.0"
