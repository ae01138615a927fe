"""
pileshots Test Suite
===================

- /unit/: individual modules (config, registry, coercion, capture, summary,
  verification, build preparation, CLI)
- /integration/: full orchestrator runs against a scripted fake browser

Test Execution:
```bash
pytest
pytest -m unit
pytest -m integration
```
"""
