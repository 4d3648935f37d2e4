"""Deepcopy generation for modelled Go types, a generator runtime with output rules, and terminal marker help."""

__version__ = "0.1.0"