"""
Controllers behind the tasks screen.

Components:
- tasks_page.py: session gating, fetching, refetch-on-update
- task_list.py: presentational list, one edit dialog per task id
- task_dialog.py: create/edit/delete dialog state machine
- mutation.py: one remote mutation plus its in-flight flag
"""
