"""
Variable environments.

Environments form a chain via `outer` for lexical scoping. A closure keeps a
reference to the environment it was created in, so a frame lives as long as
any closure that can still reach it.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from .values import MonkeyObject


@dataclass(eq=False, repr=False)
class Environment:
    """A single frame of name bindings."""
    store: Dict[str, MonkeyObject] = field(default_factory=dict)
    outer: Optional["Environment"] = None

    def get(self, name: str) -> Optional[MonkeyObject]:
        """Look up a name in this frame, then in the enclosing frames."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: MonkeyObject) -> MonkeyObject:
        """Bind a name in this frame, shadowing any outer binding."""
        self.store[name] = value
        return value

    def contains(self, name: str) -> bool:
        return self.get(name) is not None

    def enclosed(self) -> "Environment":
        """Create a child frame of this one."""
        return Environment(outer=self)

    def __repr__(self) -> str:
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return f"Environment(names={sorted(self.store)}, depth={depth})"


def new_environment() -> Environment:
    return Environment()


def new_enclosed_environment(outer: Environment) -> Environment:
    return Environment(outer=outer)
