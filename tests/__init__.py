"""
Only the root tests directory has an __init__.py; subdirectories are namespace
packages (PEP 420). Test module basenames are therefore kept unique across
tests/unit and tests/integration.
"""
