"""NiceGUI interface - thin visualization layer for chat sessions.

Responsibilities:
    - Session sidebar with new-chat and switching
    - Chat message display with live streaming output
    - Input box bound to the pending input buffer

Contains no business logic. Delegates every action to the session store.
"""
