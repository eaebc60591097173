"""Core library: configuration, repo traversal/ranking, providers, and output.

Primary namespaces:
- ``autotutor.lib.repo`` / ``ranking`` / ``content`` for the scan engine.
- ``autotutor.lib.ai_providers`` for text-generation provider wrappers.
- ``autotutor.lib.pipeline`` for end-to-end tutorial generation.
"""
