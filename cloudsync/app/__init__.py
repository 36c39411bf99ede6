"""Application composition layer.

Controllers in this package wire view models, adapters, and workflows into a
runnable command surface without placing business logic in the entry point.
"""
