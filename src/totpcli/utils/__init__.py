"""
Utility modules for totpcli: logging, colored console output and terminal control.
"""
