"""
Application Layer

Orchestrates the domain model and the infrastructure adapters.

Structure:
- commands/: write operations (EnqueueSourceCommand)
- queries/: read operations (GetCurrentSourceQuery)
- services/: source descriptors, playlist resolution, metadata races
- interfaces/: port interfaces for infrastructure adapters
"""
