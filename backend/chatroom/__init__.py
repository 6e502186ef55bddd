"""Chatroom Application Package — users and messages over HTTP.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
