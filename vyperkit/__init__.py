"""
vyperkit - Vyper compiler version manager.

Installs Vyper compiler releases side by side under ~/.vvm, tracks the
active version, and wraps the active compiler with a content-addressed
compilation cache.
"""
