"""ViewModel package for cloud sync settings state.

Call context:
    ``cloudsync/app`` modules build these view models and hand them to the
    workflows, which are their only writers.

Dependencies:
    Modules in this package depend on domain types and lightweight formatting
    helpers only. I/O adapters and use-case orchestration remain outside.
"""
