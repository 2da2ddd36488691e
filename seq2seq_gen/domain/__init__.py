"""Domain layer for the generation engine.

Entities, interfaces and the decode loop, independent of any concrete model
runtime.
"""
