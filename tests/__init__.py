"""Test suite for oddiya.

Test Structure:
- unit/: Unit tests for individual components
  - slideshow/: Planner core (seeding, arrangements, selection, query, composition)
  - config/: Config models and the JSON/YAML loader
  - reporting/: Plan diagnostics
  - utils/: Logging and JSON helpers
  - cli/: Command-line entry points
- conftest.py: Shared fixtures
"""
