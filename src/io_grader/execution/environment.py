from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

INHERITED_VARIABLES = ("PATH", "HOME")
FIXED_VARIABLES = {
    "FORCE_COLOR": "true",
    "DOTNET_CLI_HOME": "/tmp",
    "DOTNET_NOLOGO": "true",
}


@dataclass(frozen=True, slots=True)
class ChildEnvironment:
    """Immutable allowlisted environment handed to every child command.

    Example:
        ```python
        env = ChildEnvironment.from_host({"PATH": "/usr/bin", "HOME": "/root", "SECRET": "x"})
        assert "SECRET" not in env.as_dict()
        ```
    """

    variables: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Freeze the variable mapping.

        Example:
            ```python
            env = ChildEnvironment({"PATH": "/usr/bin"})
            ```
        """
        object.__setattr__(self, "variables", MappingProxyType(dict(self.variables)))

    @classmethod
    def from_host(cls, host_env: Mapping[str, str] | None = None) -> "ChildEnvironment":
        """Build the allowlist from the host environment.

        Inherited variables missing on the host are omitted.

        Example:
            ```python
            env = ChildEnvironment.from_host()
            ```
        """
        source = os.environ if host_env is None else host_env
        variables = {name: source[name] for name in INHERITED_VARIABLES if name in source}
        variables.update(FIXED_VARIABLES)
        return cls(variables)

    def as_dict(self) -> dict[str, str]:
        """Return a mutable copy suitable for `subprocess.run(env=...)`.

        Example:
            ```python
            env_dict = ChildEnvironment.from_host().as_dict()
            ```
        """
        return dict(self.variables)
