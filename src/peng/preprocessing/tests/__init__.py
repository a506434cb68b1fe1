"""
Tests for the prompt preprocessing package.

Covers classification rules, clarifying questions, prompt rendering,
the session store and the orchestration workflows.
"""
