"""Empathy Interview Bot: roleplay interviewee plus post-session coaching."""

__version__ = "0.1.0"
