"""Tests for lsc-credentials.

Test Structure:
    tests/
    ├── conftest.py          # Shared pytest fixtures
    ├── unit/                # Unit tests (stub tools, no external deps)
    │   ├── test_artifacts.py
    │   ├── test_cli.py
    │   ├── test_config.py
    │   ├── test_credentials.py
    │   ├── test_error_handling.py
    │   ├── test_installer.py
    │   ├── test_keypair.py
    │   ├── test_packages.py
    │   ├── test_process.py
    │   └── test_workspace.py
    ├── integration/         # Integration tests (requires ssh-keygen)
    │   └── test_ssh_keygen.py
    └── mocks/               # Stub tools and spy runner
        └── stub_tools.py

Usage:
    # Run all tests
    pytest

    # Run only unit tests
    pytest -m unit

    # Run only integration tests (requires ssh-keygen)
    pytest -m integration
"""
