"""Adapter package for external I/O implementations.

Purpose:
    Collect concrete implementations for domain ports (cloud API and sync
    core over HTTP, local JSON storage, vault password cache, save dialog,
    recovery kit PDF) plus the offline sync service double.

Dependencies:
    Individual submodules depend on ``requests``, ``reportlab``, ``tkinter``,
    filesystem APIs, and domain protocol definitions.

Call context:
    Imported by app composition modules (for runtime wiring) and by tests (for
    mocks and transport-level behavior verification).
"""
