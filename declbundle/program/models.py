"""Data models for the program graph answered by a type oracle."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum, Flag, auto

# Reserved names in a module's export table.
EXPORT_STAR = "__export"
DEFAULT_EXPORT = "default"
GLOBAL_THIS = "globalThis"


class SymbolFlags(Flag):
    """What kind of entity a symbol stands for."""

    NONE = 0
    VARIABLE = auto()
    FUNCTION = auto()
    CLASS = auto()
    INTERFACE = auto()
    TYPE_ALIAS = auto()
    ENUM = auto()
    PROPERTY = auto()
    TYPE_PARAMETER = auto()
    VALUE_MODULE = auto()
    NAMESPACE_MODULE = auto()
    EXPORT_STAR = auto()
    ALIAS = auto()


class NodeKind(Enum):
    """Syntax node kinds the collector distinguishes."""

    SOURCE_FILE = "source_file"
    IDENTIFIER = "identifier"
    STRING_LITERAL = "string_literal"
    QUALIFIED_NAME = "qualified_name"
    TYPE_REFERENCE = "type_reference"
    EXPRESSION_WITH_TYPE_ARGUMENTS = "expression_with_type_arguments"
    COMPUTED_PROPERTY_NAME = "computed_property_name"
    TYPE_QUERY = "type_query"
    IMPORT_TYPE = "import_type"
    HERITAGE_CLAUSE = "heritage_clause"
    EXPORT_DECLARATION = "export_declaration"
    EXPORT_SPECIFIER = "export_specifier"
    IMPORT_SPECIFIER = "import_specifier"
    INTERFACE_DECLARATION = "interface_declaration"
    CLASS_DECLARATION = "class_declaration"
    TYPE_ALIAS_DECLARATION = "type_alias_declaration"
    FUNCTION_DECLARATION = "function_declaration"
    VARIABLE_DECLARATION = "variable_declaration"
    ENUM_DECLARATION = "enum_declaration"
    MODULE_DECLARATION = "module_declaration"
    PROPERTY_SIGNATURE = "property_signature"
    PARAMETER = "parameter"
    UNION_TYPE = "union_type"
    ARRAY_TYPE = "array_type"
    OTHER = "other"


# Node kinds whose first identifier names a type-level mention.
MENTION_KINDS = frozenset(
    {
        NodeKind.TYPE_REFERENCE,
        NodeKind.EXPRESSION_WITH_TYPE_ARGUMENTS,
        NodeKind.COMPUTED_PROPERTY_NAME,
        NodeKind.TYPE_QUERY,
    }
)


@dataclass(eq=False)
class Node:
    """A syntax node. Identity is object identity."""

    kind: NodeKind
    start: int = 0
    text: str | None = None
    children: list[Node] = field(default_factory=list)
    module_specifier: Node | None = None
    source_file: SourceFile | None = field(default=None, repr=False)

    def iter_descendants(self) -> Iterator[Node]:
        """Pre-order traversal of every node below this one."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def get_source_file(self) -> SourceFile:
        if isinstance(self, SourceFile):
            return self
        if self.source_file is None:
            raise ValueError(f"{self.kind.value} node at {self.start} is not attached to a file")
        return self.source_file

    def __repr__(self) -> str:
        label = f" {self.text!r}" if self.text is not None else ""
        return f"Node({self.kind.value}{label} @{self.start})"


@dataclass(eq=False, repr=False)
class SourceFile(Node):
    """Root node of one file in the program."""

    kind: NodeKind = NodeKind.SOURCE_FILE
    file_name: str = ""
    is_external_module: bool = True
    has_no_default_lib: bool = False

    def __repr__(self) -> str:
        return f"SourceFile({self.file_name})"


@dataclass(eq=False)
class Symbol:
    """A named program entity. Identity is object identity."""

    name: str
    flags: SymbolFlags = SymbolFlags.NONE
    declarations: list[Node] = field(default_factory=list)
    # None when the symbol has no export table at all.
    exports: dict[str, Symbol] | None = None

    @property
    def is_alias(self) -> bool:
        return bool(self.flags & SymbolFlags.ALIAS)

    @property
    def is_value_module(self) -> bool:
        return bool(self.flags & SymbolFlags.VALUE_MODULE)

    def __repr__(self) -> str:
        return f"Symbol({self.name})"


@dataclass
class ResolvedModuleName:
    """Answer of the oracle's module-name resolution."""

    resolved_file_name: str
    is_external_library_import: bool = False
