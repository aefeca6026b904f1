"""
Command interpreter and script engine for the web desktop terminal.
"""
