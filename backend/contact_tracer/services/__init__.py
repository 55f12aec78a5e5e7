"""Services Layer: command history and the process-wide tracer session.

Invariants:
    - Every API mutation goes through CommandHistory (undo/redo stays consistent)
    - Services log; the core they drive never does
"""
