"""
Monster Factions.

Resolves how groups of monsters treat each other. Faction definitions are
loaded from JSON content, linked into an inheritance tree and finalized
once; afterwards any faction's attitude toward any other can be looked up.

Subpackages:
- factions: registry, loader, finalizer and attitude resolver
- content_loader: JSON record adapter and file/directory loading
- observability: diagnostic log for soft faults
"""

__version__ = "0.1.0"
