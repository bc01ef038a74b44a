"""Builds the resolved document model from a source analysis."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from .analysis.base import (
    FieldSource,
    FuncSource,
    PackageSource,
    SourceAnalysis,
    TypeSource,
    ValueSource,
    is_exported,
)
from .linker import CommentLinker, TieBreakPolicy
from .logging import get_logger
from .models import (
    Constant,
    Field,
    Function,
    Method,
    Module,
    Package,
    RefId,
    Stereotype,
    Struct,
    Variable,
)
from .registry import CrossReferenceRegistry
from .resolver import ResolveContext, SymbolResolver
from .typeform import describe_type, parse_type_form

_LOGGER = get_logger("builder")

_PARAMETER_STEREOTYPES = (Stereotype.PARAMETER, Stereotype.PARAMETER_IN)
_RESULT_STEREOTYPES = (
    Stereotype.PARAMETER,
    Stereotype.PARAMETER_OUT,
    Stereotype.PARAMETER_RESULT,
)
_EXECUTABLE_PACKAGE = "main"


class ConstructorPolicy(Protocol):
    """Decides which type, if any, an exported function constructs."""

    def owner(self, function_name: str, type_names: Sequence[str]) -> Optional[str]:
        ...


class PrefixConstructorPolicy:
    """``NewWidget`` and ``NewWidgetFromFile`` construct ``Widget``.

    When several type names match (``NewWidgetSet`` against ``Widget`` and
    ``WidgetSet``) the longest type name wins.
    """

    def __init__(self, prefixes: Sequence[str] = ("New",)) -> None:
        self.prefixes = tuple(prefixes)

    def owner(self, function_name: str, type_names: Sequence[str]) -> Optional[str]:
        matches = [
            name
            for name in type_names
            for prefix in self.prefixes
            if function_name.startswith(prefix + name)
        ]
        if not matches:
            return None
        return max(matches, key=lambda name: (len(name), name))


class ModelBuilder:
    """Turns a :class:`SourceAnalysis` into a fully resolved :class:`Module`.

    Only exported declarations are kept. After the construction pass the
    symbol resolver runs once over every type occurrence and the comment
    linker rewrites documentation text.
    """

    def __init__(
        self,
        *,
        constructor_policy: ConstructorPolicy | None = None,
        tie_break: TieBreakPolicy | None = None,
        link_comments: bool = True,
        workers: int = 1,
    ) -> None:
        self.constructor_policy = constructor_policy or PrefixConstructorPolicy()
        self.tie_break = tie_break
        self.link_comments = link_comments
        self.workers = workers

    def build(self, analysis: SourceAnalysis, context: ResolveContext) -> Module:
        module = Module(name=analysis.module, readme=analysis.readme)
        for source in sorted(analysis.packages, key=lambda p: p.import_path):
            module.packages[source.import_path] = self._package(module, source)
        _LOGGER.debug("Built %d packages for module %s", len(module.packages), module.name)

        SymbolResolver(context).resolve_module(module, workers=self.workers)

        registry = CrossReferenceRegistry.from_module(module)
        if self.link_comments:
            linker = CommentLinker.for_module(module, registry, policy=self.tie_break)
            link_module_comments(module, linker)
        return module

    def _package(self, module: Module, source: PackageSource) -> Package:
        path = source.import_path
        package = Package(
            import_path=path,
            name=source.name,
            ref_id=RefId.for_package(path),
            readme=source.readme,
            doc=source.doc,
            imports=sorted(set(source.imports)),
        )
        if source.name == _EXECUTABLE_PACKAGE:
            package.stereotypes.append(Stereotype.EXECUTABLE)

        for value in _exported(source.consts):
            package.consts[value.name] = _constant(path, value)
        for value in _exported(source.vars):
            package.vars[value.name] = _variable(path, value)
        for type_source in _exported(source.types):
            package.structs[type_source.name] = self._struct(module, path, type_source)

        for func in _exported(source.funcs):
            if func.receiver is not None:
                self._attach_method(package, func, func.receiver)
                continue
            owner = self.constructor_policy.owner(func.name, list(package.structs))
            function = _function(path, func)
            if owner is not None:
                function.stereotypes.append(Stereotype.CONSTRUCTOR)
                package.structs[owner].constructors.append(function)
            else:
                package.functions[func.name] = function

        for struct in package.structs.values():
            struct.methods.sort(key=lambda m: m.name)
            struct.constructors.sort(key=lambda f: f.name)

        package.types = _declared_types(package)
        return package

    def _struct(self, module: Module, path: str, source: TypeSource) -> Struct:
        struct = Struct(
            ref_id=RefId(path, source.name),
            name=source.name,
            kind=source.kind,
            comment=source.doc.strip("\n"),
        )
        index = module.add_struct(struct)
        if source.kind not in ("struct", "interface") and source.underlying:
            struct.underlying = describe_type(source.underlying)
        struct.generics = [
            _field(param, stereotypes=(Stereotype.GENERIC,)) for param in source.type_params
        ]
        for member in source.fields:
            if not _exported_member(member):
                continue
            struct.fields.append(
                _field(
                    member,
                    stereotypes=(Stereotype.PROPERTY,),
                    parent_struct=index,
                    line_break=True,
                )
            )
        return struct

    def _attach_method(self, package: Package, func: FuncSource, receiver: FieldSource) -> None:
        receiver_type = parse_type_form(receiver.type).identifier
        struct = package.structs.get(receiver_type)
        if struct is None:
            _LOGGER.debug(
                "Dropping method %s.%s: receiver type is not exported",
                receiver_type,
                func.name,
            )
            return
        method = _function(
            package.import_path,
            func,
            identifier=f"{struct.name}.{func.name}",
            receiver=_field(receiver, stereotypes=(Stereotype.RECEIVER,)),
        )
        method.stereotypes.append(Stereotype.METHOD)
        struct.methods.append(method)


def link_module_comments(module: Module, linker: CommentLinker) -> None:
    """Run the comment linker over every documentation text in ``module``."""
    for path, package in module.packages.items():
        package.doc = linker.link(package.doc, path)
        for constant in package.consts.values():
            constant.comment = linker.link(constant.comment, path)
            constant.doc = linker.link(constant.doc, path)
        for variable in package.vars.values():
            variable.comment = linker.link(variable.comment, path)
            variable.doc = linker.link(variable.doc, path)
        for struct in package.structs.values():
            struct.comment = linker.link(struct.comment, path)
            for member in struct.fields:
                member.comment = linker.link(member.comment, path)
                member.doc = linker.link(member.doc, path)
            for function in [*struct.constructors, *struct.methods]:
                function.comment = linker.link(function.comment, path)
        for function in package.functions.values():
            function.comment = linker.link(function.comment, path)


def format_signature(function: Function) -> str:
    """Plain-text signature, e.g. ``func (w *Widget) Resize(w, h int) error``."""
    head = "func "
    if isinstance(function, Method) and function.receiver is not None:
        head += f"({_slot(function.receiver)}) "
    name = function.name
    if function.generics:
        name += "[" + ", ".join(_slot(g) for g in function.generics) + "]"
    params = ", ".join(_slot(p) for p in function.parameters.values())
    return f"{head}{name}({params}){_results_suffix(list(function.results.values()))}"


def _results_suffix(results: List[Field]) -> str:
    if not results:
        return ""
    if len(results) == 1 and not results[0].name:
        return " " + results[0].type_desc.raw
    return " (" + ", ".join(_slot(r) for r in results) + ")"


def _slot(member: Field) -> str:
    if member.name:
        return f"{member.name} {member.type_desc.raw}"
    return member.type_desc.raw


def _function(
    path: str,
    source: FuncSource,
    *,
    identifier: Optional[str] = None,
    receiver: Optional[Field] = None,
) -> Function:
    ref_id = RefId(path, identifier or source.name)
    kwargs = dict(
        ref_id=ref_id,
        name=source.name,
        comment=source.doc,
        parameters=_slots(source.params, _PARAMETER_STEREOTYPES),
        results=_slots(source.results, _RESULT_STEREOTYPES),
        generics=[_field(p, stereotypes=(Stereotype.GENERIC,)) for p in source.type_params],
    )
    function: Function
    if receiver is not None:
        function = Method(receiver=receiver, **kwargs)
    else:
        function = Function(**kwargs)
    function.signature = format_signature(function)
    return function


def _slots(sources: Iterable[FieldSource], stereotypes: Sequence[Stereotype]) -> Dict[str, Field]:
    slots: Dict[str, Field] = {}
    for position, source in enumerate(sources):
        key = source.name
        if not key or key == "_" or key in slots:
            key = f"__{position}"
        slots[key] = _field(source, stereotypes=stereotypes)
    return slots


def _field(
    source: FieldSource,
    *,
    stereotypes: Sequence[Stereotype],
    parent_struct: Optional[int] = None,
    line_break: bool = False,
) -> Field:
    return Field(
        name=source.name,
        type_desc=describe_type(source.type, line_break=line_break),
        comment=source.comment,
        doc=source.doc,
        parent_struct=parent_struct,
        stereotypes=list(stereotypes),
    )


def _constant(path: str, source: ValueSource) -> Constant:
    return Constant(
        ref_id=RefId(path, source.name),
        name=source.name,
        type_desc=describe_type(source.type, line_break=True),
        value=source.value,
        comment=source.comment,
        doc=source.doc,
    )


def _variable(path: str, source: ValueSource) -> Variable:
    return Variable(
        ref_id=RefId(path, source.name),
        name=source.name,
        type_desc=describe_type(source.type, line_break=True),
        comment=source.comment,
        doc=source.doc,
    )


def _exported_member(member: FieldSource) -> bool:
    if member.name:
        return is_exported(member.name)
    # Embedded field: exported when the embedded type is.
    return is_exported(parse_type_form(member.type).identifier)


def _declared_types(package: Package) -> Dict[str, RefId]:
    types: Dict[str, RefId] = {}
    for group in (package.consts, package.vars, package.structs, package.functions):
        for name, entity in group.items():
            types[name] = entity.ref_id
    for struct in package.structs.values():
        for function in [*struct.constructors, *struct.methods]:
            types[function.ref_id.identifier] = function.ref_id
    return dict(sorted(types.items()))


def _exported(items: Iterable) -> list:
    return [item for item in items if is_exported(item.name)]


__all__ = [
    "ConstructorPolicy",
    "ModelBuilder",
    "PrefixConstructorPolicy",
    "format_signature",
    "link_module_comments",
]
