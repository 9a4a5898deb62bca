"""Service layer — installation operations returning ServiceResult.

Services may import from domain, infrastructure, config, and plugins.
They must never import from commands or output.
"""
