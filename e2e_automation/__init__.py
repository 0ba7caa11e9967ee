"""Playwright page-object framework for behave-driven browser tests.

This package provides:
- A lazily launched browser session per scenario
- A page action facade with wait-then-act helpers, assertions,
  dialog handling and tab management
- Lifecycle hooks that lay out timestamped report folders and
  drive the Allure CLI after each run
"""

__version__ = "0.1.0"
