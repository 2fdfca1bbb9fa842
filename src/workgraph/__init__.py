"""workgraph — workflow graph engine.

Validates task/flow graphs, propagates node statuses and auto-delegates
tasks to team members.  All core functions are pure and synchronous; they
are not internally thread-safe if the same mutable task list is shared
across concurrent calls.
"""

from workgraph.config import VERSION

__version__ = VERSION
