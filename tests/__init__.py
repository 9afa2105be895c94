"""Test suite for aecopatch.

Test Structure:
- unit/: Unit tests for individual components
  - archive/: Backend resolution and the in-memory backend
  - config/: App config models and loading
  - manifest/: Tree model, metadata files, verification
  - processing/: Worker pool, file, archive and directory processing
  - utils/: Digest, JSON and logging helpers
  - cli/: Command-line interface
- integration/: End-to-end generation against real folders
- conftest.py: Shared fixtures
"""
