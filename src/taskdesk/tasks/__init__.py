"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskDraft)
- task_collection.py: in-memory ordered collection + queries
- task_filters.py: filter labels and search predicates
- task_store.py: SQLite-backed storage (one connection per call)
- task_api.py: session workflows used by front-ends
"""
