from typing import Any, Dict, Optional
from fern.errors import FernError, UnknownVariable


class Environment:
    """A scope mapping identifiers to values, linked to its enclosing scope."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def resolve(self, name: str) -> Optional['Environment']:
        """Return the innermost scope that binds `name`, or None."""
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env
            env = env.parent
        return None

    def get(self, name: str) -> Any:
        owner = self.resolve(name)
        if owner is None:
            raise FernError(UnknownVariable(name))
        return owner.values[name]

    def assign(self, name: str, value: Any):
        # Rewrite the binding where it lives, otherwise create it here
        owner = self.resolve(name)
        if owner is None:
            owner = self
        owner.values[name] = value

    def define(self, name: str, value: Any):
        self.values[name] = value
