"""Document model shared across gdoc components.

The builder creates every entity in one pass, the resolver fills in
``TypeDesc.origin``/``TypeDesc.ref_id`` during the resolve phase, and the
renderer only reads.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .typeform import TypeForm

_ANCHOR_PREFIX = "ref"


class TypeOrigin(str, Enum):
    """Where the declaration behind a type occurrence lives."""

    BUILT_IN = "builtIn"
    LOCAL_CUSTOM = "localCustom"
    EXTERNAL_CUSTOM = "externalCustom"
    EXTERNAL_NON_CUSTOM = "externalNonCustom"


class Stereotype(str, Enum):
    """Role of an entity as interpreted in context, not expressed in the language."""

    CONSTRUCTOR = "constructor"
    METHOD = "method"
    STRUCT = "struct"
    INTERFACE = "interface"
    PROPERTY = "property"
    PARAMETER = "parameter"
    PARAMETER_IN = "in"
    PARAMETER_OUT = "out"
    PARAMETER_RESULT = "result"
    GENERIC = "generic"
    RECEIVER = "receiver"
    EXECUTABLE = "executable"
    CONSTANT = "constant"
    VARIABLE = "variable"


@dataclass(frozen=True)
class RefId:
    """Stable identity of a declaration: import path plus identifier."""

    import_path: str
    identifier: str

    def id(self) -> str:
        digest = hashlib.sha1(
            f"{self.import_path}#{self.identifier}".encode("utf-8")
        ).hexdigest()
        return f"{_ANCHOR_PREFIX}{digest}"

    @classmethod
    def for_package(cls, import_path: str) -> "RefId":
        return cls(import_path=import_path, identifier="")

    @property
    def is_package(self) -> bool:
        return self.identifier == ""


@dataclass
class MapType:
    key: "TypeDesc"
    value: "TypeDesc"


@dataclass
class TypeDesc:
    """One occurrence of a type in a declaration."""

    raw: str
    form: Optional["TypeForm"] = None
    is_pointer: bool = False
    has_line_break: bool = False
    map_type: Optional[MapType] = None
    origin: Optional[TypeOrigin] = None
    ref_id: Optional[RefId] = None

    @property
    def resolved(self) -> bool:
        return self.origin is not None


@dataclass
class Field:
    """Struct field, parameter, result, receiver or generic type parameter."""

    name: str
    type_desc: TypeDesc
    comment: str = ""
    doc: str = ""
    # Index into Module.structs; used only for alignment lookups.
    parent_struct: Optional[int] = None
    stereotypes: List[Stereotype] = field(default_factory=list)

    def has_stereotype(self, stereotype: Stereotype) -> bool:
        return stereotype in self.stereotypes


@dataclass
class Function:
    ref_id: RefId
    name: str
    comment: str = ""
    signature: str = ""
    parameters: Dict[str, Field] = field(default_factory=dict)
    results: Dict[str, Field] = field(default_factory=dict)
    generics: List[Field] = field(default_factory=list)
    stereotypes: List[Stereotype] = field(default_factory=list)


@dataclass
class Method(Function):
    receiver: Optional[Field] = None


@dataclass
class Constant:
    ref_id: RefId
    name: str
    type_desc: TypeDesc
    value: str = ""
    comment: str = ""
    doc: str = ""


@dataclass
class Variable:
    ref_id: RefId
    name: str
    type_desc: TypeDesc
    comment: str = ""
    doc: str = ""


@dataclass
class Struct:
    """A named type declaration; ``kind`` separates structs, interfaces and other types."""

    ref_id: RefId
    name: str
    kind: str = "struct"
    comment: str = ""
    underlying: Optional[TypeDesc] = None
    fields: List[Field] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)
    generics: List[Field] = field(default_factory=list)
    constructors: List[Function] = field(default_factory=list)
    index: int = -1

    def name_width(self) -> int:
        """Width of the widest named field, used to align the type column."""
        return max((len(f.name) for f in self.fields if f.name), default=0)


@dataclass
class Package:
    import_path: str
    name: str
    ref_id: RefId
    readme: str = ""
    doc: str = ""
    imports: List[str] = field(default_factory=list)
    stereotypes: List[Stereotype] = field(default_factory=list)
    types: Dict[str, RefId] = field(default_factory=dict)
    consts: Dict[str, Constant] = field(default_factory=dict)
    vars: Dict[str, Variable] = field(default_factory=dict)
    functions: Dict[str, Function] = field(default_factory=dict)
    structs: Dict[str, Struct] = field(default_factory=dict)


@dataclass
class Module:
    name: str
    readme: str = ""
    packages: Dict[str, Package] = field(default_factory=dict)
    structs: List[Struct] = field(default_factory=list)

    def add_struct(self, struct: Struct) -> int:
        """Place a struct in the arena and return its index."""
        struct.index = len(self.structs)
        self.structs.append(struct)
        return struct.index

    def struct_at(self, index: Optional[int]) -> Optional[Struct]:
        if index is None or not 0 <= index < len(self.structs):
            return None
        return self.structs[index]

    def sorted_packages(self) -> List[Package]:
        return sorted(self.packages.values(), key=lambda p: (p.name, p.import_path))


__all__ = [
    "Constant",
    "Field",
    "Function",
    "MapType",
    "Method",
    "Module",
    "Package",
    "RefId",
    "Stereotype",
    "Struct",
    "TypeDesc",
    "TypeOrigin",
    "Variable",
]
