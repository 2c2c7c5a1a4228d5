"""In-memory type oracle over a literal program graph.

InMemoryProgram answers the TypeOracle queries from tables filled in
through its builder methods (or by the snapshot loader). Module export
enumeration mimics the compiler: a module's own exports come first in
table order, wildcard-derived exports are appended afterwards and never
shadow an own export or re-export ``default``.
"""

from __future__ import annotations

from declbundle.program.models import (
    DEFAULT_EXPORT,
    EXPORT_STAR,
    GLOBAL_THIS,
    Node,
    NodeKind,
    ResolvedModuleName,
    SourceFile,
    Symbol,
    SymbolFlags,
)
from declbundle.program.syntax import get_module_specifier


class InMemoryProgram:
    """Type oracle built from explicit files, nodes, and symbols."""

    def __init__(self) -> None:
        self._files: dict[str, SourceFile] = {}
        self._external_library: set[str] = set()
        self._default_library: set[str] = set()

        self._bindings: dict[Node, Symbol] = {}
        self._alias_targets: dict[Symbol, Symbol] = {}
        self._resolutions: dict[tuple[str, str], ResolvedModuleName] = {}

        self._locals: dict[str, list[Symbol]] = {}
        self._globals: list[Symbol] = []

        self.global_this = Symbol(GLOBAL_THIS, SymbolFlags.VALUE_MODULE | SymbolFlags.NAMESPACE_MODULE)
        self.unknown_symbol = Symbol("unknown")

    # Builder

    def add_file(
        self,
        file_name: str,
        *,
        is_module: bool = True,
        external_library: bool = False,
        default_library: bool = False,
        no_default_lib: bool = False,
    ) -> SourceFile:
        """Add a file. Module files get their own module symbol."""
        source_file = SourceFile(
            file_name=file_name,
            is_external_module=is_module,
            has_no_default_lib=no_default_lib,
        )
        self._files[file_name] = source_file
        if external_library:
            self._external_library.add(file_name)
        if default_library:
            self._default_library.add(file_name)

        if is_module:
            module_symbol = Symbol(
                f'"{file_name}"',
                SymbolFlags.VALUE_MODULE,
                declarations=[source_file],
                exports={},
            )
            self._bindings[source_file] = module_symbol
        else:
            self._bindings[source_file] = self.global_this
        return source_file

    def add_node(
        self,
        parent: Node,
        kind: NodeKind,
        start: int | None = None,
        text: str | None = None,
    ) -> Node:
        """Append a child node. ``start`` defaults to the parent's offset."""
        node = Node(
            kind=kind,
            start=parent.start if start is None else start,
            text=text,
            source_file=parent.get_source_file(),
        )
        parent.children.append(node)
        return node

    def add_symbol(
        self,
        name: str,
        flags: SymbolFlags = SymbolFlags.NONE,
        declarations: list[Node] | None = None,
        alias_of: Symbol | None = None,
    ) -> Symbol:
        """Create a symbol, optionally as an alias of another one."""
        symbol = Symbol(name, flags, declarations=list(declarations or []))
        if alias_of is not None:
            self.set_alias_target(symbol, alias_of)
        return symbol

    def declare(
        self,
        parent: Node,
        kind: NodeKind,
        name: str,
        flags: SymbolFlags = SymbolFlags.NONE,
        start: int | None = None,
    ) -> Symbol:
        """Add a declaration node under ``parent`` and a symbol owning it."""
        declaration = self.add_node(parent, kind, start=start, text=name)
        symbol = self.add_symbol(name, flags, declarations=[declaration])
        self._bindings[declaration] = symbol
        return symbol

    def add_mention(
        self,
        parent: Node,
        kind: NodeKind,
        target: Symbol | None,
        name: str | None = None,
    ) -> Node:
        """Add a mention node (type reference, heritage, ...) holding an
        identifier that resolves to ``target``."""
        mention = self.add_node(parent, kind)
        identifier = self.add_node(
            mention, NodeKind.IDENTIFIER, text=name or (target.name if target else None)
        )
        if target is not None:
            self._bindings[identifier] = target
        return mention

    def add_import_type(self, parent: Node, module_name: str) -> Node:
        """Add an inline ``import("module")`` type node."""
        node = self.add_node(parent, NodeKind.IMPORT_TYPE, text=f'import("{module_name}")')
        self.add_node(node, NodeKind.STRING_LITERAL, text=module_name)
        return node

    def set_alias_target(self, alias: Symbol, target: Symbol) -> None:
        alias.flags |= SymbolFlags.ALIAS
        self._alias_targets[alias] = target

    def bind(self, node: Node, symbol: Symbol) -> None:
        """Make ``symbol_at(node)`` answer ``symbol``."""
        self._bindings[node] = symbol

    def module_symbol(self, source_file: SourceFile) -> Symbol:
        return self._bindings[source_file]

    def add_export(
        self, module: Symbol | SourceFile, symbol: Symbol, name: str | None = None
    ) -> Symbol:
        """Put ``symbol`` in a module's export table."""
        module_symbol = self._as_module_symbol(module)
        if module_symbol.exports is None:
            module_symbol.exports = {}
        module_symbol.exports[name or symbol.name] = symbol
        return symbol

    def add_reexport(
        self,
        source_file: SourceFile,
        target: Symbol,
        name: str | None = None,
        start: int | None = None,
    ) -> Symbol:
        """Add ``export { target as name }``: an alias export of ``source_file``."""
        export_name = name or target.name
        specifier = self.add_node(
            source_file, NodeKind.EXPORT_SPECIFIER, start=start, text=export_name
        )
        alias = self.add_symbol(export_name, declarations=[specifier], alias_of=target)
        self._bindings[specifier] = alias
        return self.add_export(source_file, alias, export_name)

    def add_star_export(
        self,
        module: Symbol | SourceFile,
        module_name: str,
        start: int | None = None,
        parent: Node | None = None,
        module_symbol: Symbol | None = None,
    ) -> Node:
        """Add ``export * from "module_name"`` to a module.

        ``module_symbol`` binds the specifier directly, for ambient modules
        that have no file-level resolution.
        """
        owner = self._as_module_symbol(module)
        if parent is None:
            if not isinstance(module, SourceFile):
                raise ValueError("a parent node is required for non-file modules")
            parent = module
        declaration = self.add_node(parent, NodeKind.EXPORT_DECLARATION, start=start)
        specifier = self.add_node(declaration, NodeKind.STRING_LITERAL, text=module_name)
        declaration.module_specifier = specifier
        if module_symbol is not None:
            self._bindings[specifier] = module_symbol
        self.register_star_export(owner, declaration)
        return declaration

    def register_star_export(self, module_symbol: Symbol, declaration: Node) -> None:
        """Record an existing export declaration under the module's ``__export`` entry."""
        if module_symbol.exports is None:
            module_symbol.exports = {}
        star = module_symbol.exports.get(EXPORT_STAR)
        if star is None:
            star = Symbol(EXPORT_STAR, SymbolFlags.EXPORT_STAR)
            module_symbol.exports[EXPORT_STAR] = star
        star.declarations.append(declaration)

    def add_resolution(
        self,
        containing_file: SourceFile | str,
        module_name: str,
        resolved_file_name: str,
        external: bool = False,
    ) -> None:
        """Record how ``module_name`` resolves when written in ``containing_file``."""
        file_name = (
            containing_file.file_name
            if isinstance(containing_file, SourceFile)
            else containing_file
        )
        self._resolutions[(file_name, module_name)] = ResolvedModuleName(
            resolved_file_name, is_external_library_import=external
        )

    def add_global(self, symbol: Symbol) -> Symbol:
        """Make a symbol visible in the global scope of every file."""
        self._globals.append(symbol)
        return symbol

    def add_local(self, source_file: SourceFile, symbol: Symbol) -> Symbol:
        """Make a symbol visible in the top-level scope of one file."""
        self._locals.setdefault(source_file.file_name, []).append(symbol)
        return symbol

    def _as_module_symbol(self, module: Symbol | SourceFile) -> Symbol:
        if isinstance(module, SourceFile):
            return self.module_symbol(module)
        return module

    # TypeOracle

    def symbol_at(self, node: Node) -> Symbol | None:
        return self._bindings.get(node)

    def resolve_alias(self, symbol: Symbol) -> Symbol:
        seen: set[Symbol] = set()
        current = symbol
        while current.is_alias:
            if current in seen:
                return self.unknown_symbol
            seen.add(current)
            target = self._alias_targets.get(current)
            if target is None:
                return self.unknown_symbol
            current = target
        return current

    def exports_of(self, module_symbol: Symbol) -> list[Symbol]:
        return list(self._collect_exports(module_symbol, set()).values())

    def _collect_exports(self, module_symbol: Symbol, visited: set[Symbol]) -> dict[str, Symbol]:
        if module_symbol in visited or module_symbol.exports is None:
            return {}
        visited.add(module_symbol)

        result = {
            name: symbol for name, symbol in module_symbol.exports.items() if name != EXPORT_STAR
        }

        star = module_symbol.exports.get(EXPORT_STAR)
        if star is not None:
            for declaration in star.declarations:
                target = self._module_of_export_declaration(declaration)
                if target is None:
                    continue
                for name, symbol in self._collect_exports(target, visited).items():
                    if name != DEFAULT_EXPORT and name not in result:
                        result[name] = symbol
        return result

    def _module_of_export_declaration(self, declaration: Node) -> Symbol | None:
        specifier = get_module_specifier(declaration)
        if specifier is None or specifier.text is None:
            return None
        resolved = self.resolve_module_name(specifier.text, declaration.get_source_file())
        if resolved is not None:
            source_file = self.get_source_file(resolved.resolved_file_name)
            return self.symbol_at(source_file) if source_file is not None else None
        return self.symbol_at(specifier)

    def scope_symbols_at(self, source_file: SourceFile) -> list[Symbol]:
        symbols = list(self._locals.get(source_file.file_name, []))
        seen = set(symbols)
        for symbol in self._globals:
            if symbol not in seen:
                symbols.append(symbol)
                seen.add(symbol)
        return symbols

    def resolve_module_name(
        self, module_name: str, containing_file: SourceFile
    ) -> ResolvedModuleName | None:
        return self._resolutions.get((containing_file.file_name, module_name))

    def get_source_file(self, file_name: str) -> SourceFile | None:
        return self._files.get(file_name)

    def source_files(self) -> list[SourceFile]:
        return list(self._files.values())

    def is_external_library_file(self, source_file: SourceFile) -> bool:
        return source_file.file_name in self._external_library

    def is_default_library_file(self, source_file: SourceFile) -> bool:
        return source_file.file_name in self._default_library

    def __repr__(self) -> str:
        return f"InMemoryProgram(files={len(self._files)}, bindings={len(self._bindings)})"
