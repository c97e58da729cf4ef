"""
fourth_down.session — dashboard state and the submit boundary.

Modules:
  state       — ``DashboardState``: last result, in-flight flag, last error.
  controller  — ``SubmissionController``: coerce → request → update state.
"""
