"""Pipeline drills.

This package holds the fixed people dataset and one parameterless
callable per exercise, each composing a pipeline over that data.
"""
