"""Infrastructure layer — vault filesystem access and persisted indexes.

This layer depends on stdlib and the domain layer only. It must never
import from services, commands, or output. Services bridge between
infrastructure and the user-facing layers.
"""
