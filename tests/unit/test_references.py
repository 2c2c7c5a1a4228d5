"""Unit tests for alias resolution and reference extraction."""

from declbundle.core.models import Reference
from declbundle.core.references import ReferenceExtractor, resolve_terminal
from declbundle.program import InMemoryProgram, NodeKind, SourceFile, Symbol, SymbolFlags


def make_program() -> tuple[InMemoryProgram, SourceFile]:
    """Create a program with one project file."""
    program = InMemoryProgram()
    source = program.add_file("src/types.ts")
    return program, source


def make_interface(program: InMemoryProgram, source: SourceFile, name: str, start: int) -> Symbol:
    return program.declare(
        source, NodeKind.INTERFACE_DECLARATION, name, SymbolFlags.INTERFACE, start=start
    )


def add_property(program: InMemoryProgram, owner: Symbol, target: Symbol | None, name: str = "prop") -> None:
    """Add ``name: Target`` to the owner's first declaration."""
    prop = program.add_node(owner.declarations[0], NodeKind.PROPERTY_SIGNATURE, text=name)
    program.add_mention(prop, NodeKind.TYPE_REFERENCE, target)


def labels(refs: list[Reference]) -> list[str]:
    return [r.label for r in refs]


class TestResolveTerminal:
    """Tests for alias resolution."""

    def test_terminal_symbol_resolves_to_itself(self) -> None:
        program, source = make_program()
        node = make_interface(program, source, "Node", 0)

        assert resolve_terminal(program, node) is node
        assert resolve_terminal(program, resolve_terminal(program, node)) is node

    def test_alias_chain_resolves_to_terminal(self) -> None:
        program, source = make_program()
        target = make_interface(program, source, "Target", 0)
        first = program.add_symbol("First", alias_of=target)
        second = program.add_symbol("Second", alias_of=first)

        assert resolve_terminal(program, second) is target

    def test_dangling_alias_resolves_to_symbol_without_declarations(self) -> None:
        program, _ = make_program()
        ghost = program.add_symbol("Ghost", SymbolFlags.ALIAS)

        resolved = resolve_terminal(program, ghost)

        assert resolved is not ghost
        assert resolved.declarations == []


class TestReferenceExtractor:
    """Tests for ReferenceExtractor."""

    def test_self_reference_terminates(self) -> None:
        """interface Node { next: Node }"""
        program, source = make_program()
        node = make_interface(program, source, "Node", 0)
        add_property(program, node, node, "next")

        refs = ReferenceExtractor(program).get_references(node)

        assert labels(refs) == ["Node"]
        assert refs[0].subrefs == []
        assert refs[0].declaration_index == 0

    def test_mutual_reference_terminates(self) -> None:
        program, source = make_program()
        a = make_interface(program, source, "A", 0)
        b = make_interface(program, source, "B", 20)
        add_property(program, a, b)
        add_property(program, b, a)

        refs = ReferenceExtractor(program).get_references(a)

        assert labels(refs) == ["B"]
        assert labels(refs[0].subrefs) == ["A"]
        assert refs[0].subrefs[0].subrefs == []

    def test_longer_cycle_terminates(self) -> None:
        program, source = make_program()
        a = make_interface(program, source, "A", 0)
        b = make_interface(program, source, "B", 20)
        c = make_interface(program, source, "C", 40)
        add_property(program, a, b)
        add_property(program, b, c)
        add_property(program, c, a)

        refs = ReferenceExtractor(program).get_references(a)

        assert [r.label for r in refs[0]] == ["B", "C", "A"]
        assert len(refs[0]) == 3

    def test_shared_dependency_expanded_under_each_mention(self) -> None:
        """Diamond: A -> B -> D and A -> C -> D."""
        program, source = make_program()
        a = make_interface(program, source, "A", 0)
        b = make_interface(program, source, "B", 20)
        c = make_interface(program, source, "C", 40)
        d = make_interface(program, source, "D", 60)
        add_property(program, a, b, "b")
        add_property(program, a, c, "c")
        add_property(program, b, d)
        add_property(program, c, d)

        refs = ReferenceExtractor(program).get_references(a)

        assert labels(refs) == ["B", "C"]
        assert labels(refs[0].subrefs) == ["D"]
        assert labels(refs[1].subrefs) == ["D"]

    def test_all_mention_shapes(self) -> None:
        """class Foo extends Base { [KEY]: typeof config; opt: Opt }"""
        program, source = make_program()
        base = program.declare(source, NodeKind.CLASS_DECLARATION, "Base", SymbolFlags.CLASS, 0)
        key = program.declare(source, NodeKind.VARIABLE_DECLARATION, "KEY", SymbolFlags.VARIABLE, 20)
        config = program.declare(
            source, NodeKind.VARIABLE_DECLARATION, "config", SymbolFlags.VARIABLE, 40
        )
        opt = make_interface(program, source, "Opt", 60)
        foo = program.declare(source, NodeKind.CLASS_DECLARATION, "Foo", SymbolFlags.CLASS, 80)

        declaration = foo.declarations[0]
        heritage = program.add_node(declaration, NodeKind.HERITAGE_CLAUSE)
        program.add_mention(heritage, NodeKind.EXPRESSION_WITH_TYPE_ARGUMENTS, base)
        computed = program.add_node(declaration, NodeKind.PROPERTY_SIGNATURE)
        program.add_mention(computed, NodeKind.COMPUTED_PROPERTY_NAME, key)
        program.add_mention(computed, NodeKind.TYPE_QUERY, config)
        add_property(program, foo, opt, "opt")

        refs = ReferenceExtractor(program).get_references(foo)

        assert labels(refs) == ["Base", "KEY", "config", "Opt"]
        assert all(r.subrefs == [] for r in refs)

    def test_nested_mentions_are_found(self) -> None:
        """items: Array<Box<Item>>"""
        program, source = make_program()
        lib = program.add_file("lib.es5.d.ts", is_module=False, default_library=True)
        array = make_interface(program, lib, "Array", 0)
        box = make_interface(program, source, "Box", 0)
        item = make_interface(program, source, "Item", 20)
        holder = make_interface(program, source, "Holder", 40)

        prop = program.add_node(holder.declarations[0], NodeKind.PROPERTY_SIGNATURE, text="items")
        outer = program.add_mention(prop, NodeKind.TYPE_REFERENCE, array)
        inner = program.add_mention(outer, NodeKind.TYPE_REFERENCE, box)
        program.add_mention(inner, NodeKind.TYPE_REFERENCE, item)

        refs = ReferenceExtractor(program).get_references(holder)

        assert labels(refs) == ["Array", "Box", "Item"]

    def test_qualified_name_uses_first_identifier(self) -> None:
        """value: ns.Inner"""
        program, source = make_program()
        ns = program.declare(
            source, NodeKind.MODULE_DECLARATION, "ns", SymbolFlags.NAMESPACE_MODULE, 0
        )
        holder = make_interface(program, source, "Holder", 40)

        prop = program.add_node(holder.declarations[0], NodeKind.PROPERTY_SIGNATURE)
        mention = program.add_node(prop, NodeKind.TYPE_REFERENCE)
        qualified = program.add_node(mention, NodeKind.QUALIFIED_NAME)
        left = program.add_node(qualified, NodeKind.IDENTIFIER, text="ns")
        program.add_node(qualified, NodeKind.IDENTIFIER, text="Inner")
        program.bind(left, ns)

        refs = ReferenceExtractor(program).get_references(holder)

        assert labels(refs) == ["ns"]

    def test_import_type_recorded_without_subrefs(self) -> None:
        """value: import("./other").Thing"""
        program, source = make_program()
        holder = make_interface(program, source, "Holder", 0)
        prop = program.add_node(holder.declarations[0], NodeKind.PROPERTY_SIGNATURE)
        program.add_import_type(prop, "./other")

        refs = ReferenceExtractor(program).get_references(holder)

        assert len(refs) == 1
        assert refs[0].is_import_type
        assert refs[0].subrefs == []
        assert refs[0].label == 'import("./other")'

    def test_external_library_symbol_is_not_expanded(self) -> None:
        program, source = make_program()
        vendor = program.add_file("node_modules/vendor/index.d.ts", external_library=True)
        helper = make_interface(program, source, "Helper", 0)
        external = make_interface(program, vendor, "External", 0)
        add_property(program, external, helper)

        assert ReferenceExtractor(program).get_references(external) == []

    def test_external_mention_has_no_subrefs(self) -> None:
        program, source = make_program()
        vendor = program.add_file("node_modules/vendor/index.d.ts", external_library=True)
        inner = make_interface(program, vendor, "Inner", 0)
        external = make_interface(program, vendor, "External", 20)
        add_property(program, external, inner)
        holder = make_interface(program, source, "Holder", 0)
        add_property(program, holder, external)

        refs = ReferenceExtractor(program).get_references(holder)

        assert labels(refs) == ["External"]
        assert refs[0].subrefs == []

    def test_subreferences_follow_aliases(self) -> None:
        """import { B as Imported } from "./b"; interface A { b: Imported }"""
        program, source = make_program()
        other = program.add_file("src/b.ts")
        b = make_interface(program, other, "B", 0)
        c = make_interface(program, other, "C", 20)
        add_property(program, b, c)
        imported = program.add_symbol("Imported", alias_of=b)
        a = make_interface(program, source, "A", 0)
        add_property(program, a, imported)

        refs = ReferenceExtractor(program).get_references(a)

        assert labels(refs) == ["Imported"]
        assert labels(refs[0].subrefs) == ["C"]

    def test_unresolved_identifier_has_no_subrefs(self) -> None:
        program, source = make_program()
        holder = make_interface(program, source, "Holder", 0)
        prop = program.add_node(holder.declarations[0], NodeKind.PROPERTY_SIGNATURE)
        program.add_mention(prop, NodeKind.TYPE_REFERENCE, None, name="Missing")

        refs = ReferenceExtractor(program).get_references(holder)

        assert labels(refs) == ["Missing"]
        assert refs[0].subrefs == []

    def test_mention_of_symbol_without_declarations_has_no_subrefs(self) -> None:
        program, source = make_program()
        bare = program.add_symbol("Bare", SymbolFlags.TYPE_ALIAS)
        holder = make_interface(program, source, "Holder", 0)
        add_property(program, holder, bare)

        refs = ReferenceExtractor(program).get_references(holder)

        assert labels(refs) == ["Bare"]
        assert refs[0].subrefs == []

    def test_declaration_index_tracks_merged_declarations(self) -> None:
        """Two ``interface Merged`` blocks, each mentioning a different type."""
        program, source = make_program()
        first = make_interface(program, source, "First", 0)
        second = make_interface(program, source, "Second", 20)
        merged = make_interface(program, source, "Merged", 40)
        extra = program.add_node(source, NodeKind.INTERFACE_DECLARATION, start=80, text="Merged")
        merged.declarations.append(extra)

        add_property(program, merged, first, "a")
        prop = program.add_node(extra, NodeKind.PROPERTY_SIGNATURE, text="b")
        program.add_mention(prop, NodeKind.TYPE_REFERENCE, second)

        refs = ReferenceExtractor(program).get_references(merged)

        assert [(r.label, r.declaration_index) for r in refs] == [("First", 0), ("Second", 1)]

    def test_source_file_declaration_is_skipped(self) -> None:
        program, source = make_program()
        target = make_interface(program, source, "Target", 0)
        holder = make_interface(program, source, "Holder", 20)
        add_property(program, holder, target)

        module = program.module_symbol(source)

        assert ReferenceExtractor(program).get_references(module) == []


class TestReference:
    """Tests for the Reference tree model."""

    def test_iteration_is_preorder(self) -> None:
        program, source = make_program()
        a = make_interface(program, source, "A", 0)
        b = make_interface(program, source, "B", 20)
        c = make_interface(program, source, "C", 40)
        d = make_interface(program, source, "D", 60)
        root = make_interface(program, source, "Root", 80)
        add_property(program, root, a)
        add_property(program, a, b, "b")
        add_property(program, a, d, "d")
        add_property(program, b, c)

        refs = ReferenceExtractor(program).get_references(root)

        assert [r.label for r in refs[0]] == ["A", "B", "C", "D"]
        assert len(refs[0]) == 4
