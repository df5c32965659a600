"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskDraft) and payload decoding
- task_api.py: REST client for the /tasks resource
- controller.py: task list view state (cache, search, modal, row actions)
"""
