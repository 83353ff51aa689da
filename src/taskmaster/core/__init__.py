"""
Core layer.

Components:
- models.py: data structures (Task, Project, TaskDraft, Session, enums)
- ports.py: Protocols for the task service, session provider and notifier
- query_cache.py: in-memory query cache (fetch/invalidate, no merge)
- result.py: Ok/Err values returned from awaited calls
- errors.py: exception hierarchy
- state.py: AppState wired by the bootstrap
"""
