"""
Declbundle: Symbol collection for bundled type-declaration files.

Given an entry module and a type-checked program, declbundle decides which
symbols a single bundled declaration file must contain, and in what order:
- Exports restored to source order, wildcard re-exports flattened
- Aliases resolved to their terminal symbols
- Type references followed transitively, cycle-safe
- External `export * from "lib"` kept as pass-through module names

Usage:
    from declbundle.core import SymbolCollector
    from declbundle.program import load_snapshot

    program = load_snapshot(Path("program.json"))
    result = SymbolCollector(program).collect_file("src/index.ts")
"""

__version__ = "0.1.0"
