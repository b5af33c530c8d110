"""
Data models for the environment variable catalog.
"""

import json
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class DefinitionKind(str, Enum):
    """How a variable's name was first discovered."""

    APPLICATION_YAML = "APPLICATION_YAML"
    APPLICATION_PROPERTIES = "APPLICATION_PROPERTIES"
    SPRING_VALUE = "SPRING_VALUE"
    CONFIG_PROPERTIES = "CONFIG_PROPERTIES"
    SYSTEM_GETENV = "SYSTEM_GETENV"
    SYSTEM_PROPERTY = "SYSTEM_PROPERTY"
    ENVIRONMENT_API = "ENVIRONMENT_API"


class UsagePurpose(str, Enum):
    """Why a variable's value is consumed at a usage site."""

    DATABASE_CONNECTION = "DATABASE_CONNECTION"
    EXTERNAL_API = "EXTERNAL_API"
    AUTHENTICATION = "AUTHENTICATION"
    FEATURE_FLAG = "FEATURE_FLAG"
    LOGGING_CONFIG = "LOGGING_CONFIG"
    CACHE_CONFIG = "CACHE_CONFIG"
    SERVER_CONFIG = "SERVER_CONFIG"
    MESSAGING_CONFIG = "MESSAGING_CONFIG"
    OTHER = "OTHER"


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class Definition:
    """Site and pattern by which a variable was first discovered.

    Attributes:
        kind: Which of the definition patterns produced it.
        file_path: Path relative to the repository root, ``/`` separated.
        line_number: 1-indexed line in the file.
        code_snippet: Source or config text around the definition.
        containing_type_name: Package-qualified type name (source files only).
        field_or_method_name: Bound field, or the method holding the lookup call.
        module_name: Nearest enclosing build module.
    """

    kind: DefinitionKind
    file_path: str
    line_number: int
    code_snippet: str
    module_name: str
    containing_type_name: Optional[str] = None
    field_or_method_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {key: _plain(value) for key, value in asdict(self).items()}


@dataclass(frozen=True)
class Usage:
    """A method where a variable's value is consumed."""

    containing_type_name: str
    method_name: str
    line_number: int
    file_path: str
    context_description: str
    purpose: UsagePurpose
    code_snippet: str

    @property
    def key(self) -> tuple:
        """Uniqueness key: one usage per (type, method)."""
        return (self.containing_type_name, self.method_name)

    def to_dict(self) -> Dict[str, Any]:
        return {key: _plain(value) for key, value in asdict(self).items()}


@dataclass
class Variable:
    """Catalog entry aggregating a variable's definition and usages."""

    name: str
    default_value: Optional[str]
    required: bool
    definition: Definition
    usages: List[Usage] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "default_value": self.default_value,
            "required": self.required,
            "definition": self.definition.to_dict(),
            "usages": [usage.to_dict() for usage in self.usages],
        }


class CatalogFrozenError(RuntimeError):
    """Raised when a frozen catalog is mutated."""


class VariableCatalog:
    """Ordered name -> Variable mapping owned by a single analysis run.

    Insertion order is discovery order. The first definition of a name wins;
    later attempts to add the same name are ignored.
    """

    def __init__(self) -> None:
        self._variables: Dict[str, Variable] = {}
        self._frozen = False

    def _check_mutable(self) -> None:
        if self._frozen:
            raise CatalogFrozenError("Variable catalog is frozen")

    def add_if_absent(self, variable: Variable) -> bool:
        """Add ``variable`` unless its name is already cataloged.

        Returns:
            True if the variable was added.
        """
        self._check_mutable()
        if variable.name in self._variables:
            return False
        self._variables[variable.name] = variable
        return True

    def extend_usages(self, name: str, usages: List[Usage]) -> None:
        self._check_mutable()
        self._variables[name].usages.extend(usages)

    def replace_usages(self, name: str, usages: List[Usage]) -> None:
        self._check_mutable()
        self._variables[name].usages = list(usages)

    def freeze(self) -> "VariableCatalog":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Optional[Variable]:
        return self._variables.get(name)

    def __getitem__(self, name: str) -> Variable:
        return self._variables[name]

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def names(self) -> List[str]:
        return list(self._variables)

    def variables(self) -> List[Variable]:
        return list(self._variables.values())

    def to_dict(self) -> Dict[str, Any]:
        return {name: variable.to_dict() for name, variable in self._variables.items()}

    def to_json(self) -> str:
        """Serialize in catalog order; identical input gives identical text."""
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    def __repr__(self) -> str:
        return f"VariableCatalog(size={len(self)}, frozen={self._frozen})"
