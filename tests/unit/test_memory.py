"""Unit tests for the in-memory oracle."""

from declbundle.program import (
    EXPORT_STAR,
    InMemoryProgram,
    NodeKind,
    SymbolFlags,
)
from declbundle.program.syntax import find_first_child, get_module_specifier, is_relative_module_name


class TestExportsOf:
    """Tests for module export enumeration."""

    def test_wildcard_exports_come_last(self) -> None:
        program = InMemoryProgram()
        entry = program.add_file("src/index.ts")
        other = program.add_file("src/other.ts")
        program.add_resolution(entry, "./other", "src/other.ts")
        program.add_star_export(entry, "./other", start=0)
        for name in ("B", "C"):
            program.add_export(other, program.declare(other, NodeKind.INTERFACE_DECLARATION, name))
        program.add_export(entry, program.declare(entry, NodeKind.INTERFACE_DECLARATION, "A", start=40))

        names = [s.name for s in program.exports_of(program.module_symbol(entry))]

        assert names == ["A", "B", "C"]

    def test_own_export_shadows_wildcard(self) -> None:
        program = InMemoryProgram()
        entry = program.add_file("src/index.ts")
        other = program.add_file("src/other.ts")
        program.add_resolution(entry, "./other", "src/other.ts")
        program.add_star_export(entry, "./other")
        shadowed = program.add_export(other, program.declare(other, NodeKind.INTERFACE_DECLARATION, "A"))
        own = program.add_export(entry, program.declare(entry, NodeKind.INTERFACE_DECLARATION, "A"))

        exports = program.exports_of(program.module_symbol(entry))

        assert exports == [own]
        assert shadowed not in exports

    def test_wildcard_skips_default(self) -> None:
        program = InMemoryProgram()
        entry = program.add_file("src/index.ts")
        other = program.add_file("src/other.ts")
        program.add_resolution(entry, "./other", "src/other.ts")
        program.add_star_export(entry, "./other")
        program.add_export(other, program.declare(other, NodeKind.CLASS_DECLARATION, "W"), "default")
        named = program.add_export(other, program.declare(other, NodeKind.INTERFACE_DECLARATION, "N"))

        assert program.exports_of(program.module_symbol(entry)) == [named]

    def test_star_entry_not_listed(self) -> None:
        program = InMemoryProgram()
        entry = program.add_file("src/index.ts")
        program.add_star_export(entry, "./nowhere")

        module = program.module_symbol(entry)

        assert module.exports is not None and EXPORT_STAR in module.exports
        assert program.exports_of(module) == []


class TestAliases:
    """Tests for alias resolution in the oracle."""

    def test_alias_cycle_resolves_to_unknown(self) -> None:
        program = InMemoryProgram()
        a = program.add_symbol("A", SymbolFlags.ALIAS)
        b = program.add_symbol("B", alias_of=a)
        program.set_alias_target(a, b)

        assert program.resolve_alias(a) is program.unknown_symbol

    def test_non_alias_resolves_to_itself(self) -> None:
        program = InMemoryProgram()
        plain = program.add_symbol("Plain", SymbolFlags.INTERFACE)

        assert program.resolve_alias(plain) is plain


class TestScope:
    """Tests for scope lookup."""

    def test_locals_before_globals_without_duplicates(self) -> None:
        program = InMemoryProgram()
        script = program.add_file("src/script.js", is_module=False)
        shared = program.add_symbol("shared")
        local = program.add_local(script, program.add_symbol("local"))
        program.add_local(script, shared)
        program.add_global(shared)
        other = program.add_global(program.add_symbol("other"))

        assert program.scope_symbols_at(script) == [local, shared, other]


class TestSyntax:
    """Tests for syntax helpers."""

    def test_find_first_child_is_depth_first(self) -> None:
        program = InMemoryProgram()
        source = program.add_file("src/a.ts")
        outer = program.add_node(source, NodeKind.TYPE_REFERENCE)
        qualified = program.add_node(outer, NodeKind.QUALIFIED_NAME)
        first = program.add_node(qualified, NodeKind.IDENTIFIER, text="ns")
        program.add_node(outer, NodeKind.IDENTIFIER, text="later")

        assert find_first_child(outer, NodeKind.IDENTIFIER) is first
        assert find_first_child(outer, NodeKind.STRING_LITERAL) is None

    def test_get_module_specifier(self) -> None:
        program = InMemoryProgram()
        source = program.add_file("src/a.ts")
        declaration = program.add_star_export(source, "./b", start=3)
        bare = program.add_node(source, NodeKind.EXPORT_DECLARATION)

        specifier = get_module_specifier(declaration)
        assert specifier is not None and specifier.text == "./b"
        assert specifier.kind == NodeKind.STRING_LITERAL
        assert get_module_specifier(bare) is None
        assert declaration.get_source_file() is source

    def test_is_relative_module_name(self) -> None:
        assert is_relative_module_name("./a")
        assert is_relative_module_name("../a")
        assert is_relative_module_name("/abs/a")
        assert is_relative_module_name(".")
        assert is_relative_module_name("C:/lib/a")
        assert not is_relative_module_name("lodash")
        assert not is_relative_module_name("@scope/pkg")
