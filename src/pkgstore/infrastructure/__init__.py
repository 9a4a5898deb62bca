"""Infrastructure layer — filesystem walking, bulk copy, symlinks, shims.

This layer performs all disk mutation. It depends on the domain layer
for value types and errors, never on services, commands, or output.
"""
