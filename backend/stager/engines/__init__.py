"""
Engines: SQL dump templating and materialization.
"""
