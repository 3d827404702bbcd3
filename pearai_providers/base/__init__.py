"""Base layer: errors, logging, models, DTOs, HTTP, streaming and resilience.

Nothing in this package knows about a specific server; the PearAI client in
``pearai_providers.pearai`` composes these pieces.
"""
