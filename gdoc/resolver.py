"""Classification of type occurrences against per-package symbol tables."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, Iterator, List, Optional

from .analysis.base import SourceAnalysis, SourceAnalyzer, SymbolTable
from .logging import get_logger
from .models import Function, Method, Module, Package, RefId, TypeDesc, TypeOrigin
from .typeform import describe_type, parse_type_form

_LOGGER = get_logger("resolver")


class ResolveContext:
    """Symbol tables of every loaded package, assembled before resolution starts.

    Tables are indexed by import path and by short package name. When two
    loaded packages share a short name, the one with the lexicographically
    smallest import path answers qualifier lookups.
    """

    def __init__(self, tables: Iterable[SymbolTable]) -> None:
        self._by_path: Dict[str, SymbolTable] = {}
        self._by_name: Dict[str, SymbolTable] = {}
        for table in sorted(tables, key=lambda t: t.import_path):
            self._by_path[table.import_path] = table
            existing = self._by_name.setdefault(table.name, table)
            if existing is not table:
                _LOGGER.debug(
                    "Package name %s is shared by %s and %s; qualifiers resolve to %s",
                    table.name,
                    existing.import_path,
                    table.import_path,
                    existing.import_path,
                )

    @classmethod
    def load(cls, analyzer: SourceAnalyzer, analysis: SourceAnalysis) -> "ResolveContext":
        """Load a symbol table for every package in ``analysis``.

        An :class:`~gdoc.analysis.base.AnalyzerLoadFailure` for any package
        propagates: partial symbol information would yield unreliable links.
        """
        tables: List[SymbolTable] = []
        for package in analysis.packages:
            table = analyzer.symbol_table(package)
            _LOGGER.debug("Loaded %d symbols for %s", len(table.symbols), table.import_path)
            tables.append(table)
        return cls(tables)

    def table_for_path(self, import_path: str) -> Optional[SymbolTable]:
        return self._by_path.get(import_path)

    def table_for_name(self, name: str) -> Optional[SymbolTable]:
        return self._by_name.get(name)

    @property
    def import_paths(self) -> List[str]:
        return list(self._by_path)


class SymbolResolver:
    """Sets ``origin`` and ``ref_id`` on type descriptions.

    Results depend only on the context, so resolving an unchanged model twice
    produces identical origins and reference ids.
    """

    def __init__(self, context: ResolveContext) -> None:
        self.context = context

    def resolve(self, import_path: str, type_desc: TypeDesc) -> TypeDesc:
        form = type_desc.form
        if form is None:
            form = parse_type_form(type_desc.raw)
            type_desc.form = form
        type_desc.is_pointer = form.is_pointer

        if not form.structured:
            type_desc.origin = TypeOrigin.BUILT_IN
            type_desc.ref_id = None
            return type_desc

        if form.is_map:
            map_type = type_desc.map_type or describe_type(type_desc.raw).map_type
            if map_type is None:
                raise ValueError(f"map type {type_desc.raw!r} has no key/value split")
            type_desc.map_type = map_type
            type_desc.origin = TypeOrigin.BUILT_IN
            type_desc.ref_id = None
            self.resolve(import_path, map_type.key)
            self.resolve(import_path, map_type.value)
            return type_desc

        if form.qualifier is not None:
            table = self.context.table_for_name(form.qualifier)
            if table is not None and form.identifier in table:
                type_desc.origin = TypeOrigin.EXTERNAL_CUSTOM
                type_desc.ref_id = RefId(table.import_path, form.identifier)
            else:
                type_desc.origin = TypeOrigin.EXTERNAL_NON_CUSTOM
                type_desc.ref_id = None
            return type_desc

        local = self.context.table_for_path(import_path)
        if local is not None and form.identifier in local:
            type_desc.origin = TypeOrigin.LOCAL_CUSTOM
            type_desc.ref_id = RefId(import_path, form.identifier)
        else:
            type_desc.origin = TypeOrigin.BUILT_IN
            type_desc.ref_id = None
        return type_desc

    def resolve_package(self, package: Package) -> int:
        """Resolve every type occurrence declared in ``package``; return the count."""
        count = 0
        for type_desc in iter_type_descs(package):
            self.resolve(package.import_path, type_desc)
            count += 1
        return count

    def resolve_module(self, module: Module, *, workers: int = 1) -> int:
        """Resolve all packages, optionally in a thread pool.

        Packages only touch their own type descriptions and the context is
        read-only, so per-package work needs no locking.
        """
        packages = [module.packages[path] for path in sorted(module.packages)]
        if workers <= 1 or len(packages) <= 1:
            counts = [self.resolve_package(package) for package in packages]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                counts = list(pool.map(self.resolve_package, packages))
        total = sum(counts)
        _LOGGER.debug("Resolved %d type occurrences across %d packages", total, len(packages))
        return total


def iter_type_descs(package: Package) -> Iterator[TypeDesc]:
    """Yield every top-level type occurrence of a package (map sides are reached by recursion)."""
    for constant in package.consts.values():
        if constant.type_desc.raw:
            yield constant.type_desc
    for variable in package.vars.values():
        if variable.type_desc.raw:
            yield variable.type_desc
    for struct in package.structs.values():
        if struct.underlying is not None:
            yield struct.underlying
        for generic in struct.generics:
            yield generic.type_desc
        for member in struct.fields:
            yield member.type_desc
        for constructor in struct.constructors:
            yield from _function_type_descs(constructor)
        for method in struct.methods:
            yield from _function_type_descs(method)
    for function in package.functions.values():
        yield from _function_type_descs(function)


def _function_type_descs(function: Function) -> Iterator[TypeDesc]:
    if isinstance(function, Method) and function.receiver is not None:
        yield function.receiver.type_desc
    for generic in function.generics:
        yield generic.type_desc
    for param in function.parameters.values():
        yield param.type_desc
    for result in function.results.values():
        yield result.type_desc


__all__ = ["ResolveContext", "SymbolResolver", "iter_type_descs"]
