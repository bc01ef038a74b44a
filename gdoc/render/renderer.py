"""Renders a resolved :class:`~gdoc.models.Module` as one AsciiDoc document.

The section layout lives in the Jinja templates next to this module
(``templates/*.j2``); the helpers here produce the styled lines those
templates arrange.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader

from ..models import (
    Field,
    Function,
    Method,
    Module,
    Package,
    RefId,
    Stereotype,
    Struct,
    TypeDesc,
    TypeOrigin,
)
from ..typeform import parse_type_form
from . import markup
from .reflow import reflow

FILTERED_FIELDS_NOTICE = "// contains filtered or unexported fields"
FILTERED_METHODS_NOTICE = "// contains filtered or unexported methods"
DOCINFO_FILENAME = "docinfo.html"
_FIELD_INDENT = 2
_FUNC_PREFIX = "func("
_PASSTHROUGH_FACETS = ("*", "...")

THEMES: Dict[str, Dict[str, str]] = {
    "light": {
        "code_background": "#F9F8F5",
        "article_background": "#FFFFFF",
        "font": "#0E0E0D",
        "links": "#2156a5",
    },
    "dark": {
        "code_background": "#343231",
        "article_background": "#3C4041",
        "font": "#C1C1C1",
        "links": "#9abbed",
    },
}

_ROLE_COLORS: List[Tuple[str, str]] = [
    (markup.KEYWORD, "#a626a4"),
    (markup.BUILTIN, "#0184bc"),
    (markup.TYPE, "#c18401"),
    (markup.STRING, "#50a14f"),
    (markup.COMMENT, "#8a8a8a"),
    (markup.INFO, "#8a8a8a"),
]


class RenderError(RuntimeError):
    """Raised for model states the renderer cannot represent (programmer errors)."""


@dataclass
class RenderOptions:
    """Presentation switches; none of them change anchors or ordering."""

    package_separator: str = "/"
    toc: bool = True
    theme: Optional[str] = "light"
    include_readme: bool = True
    include_index: bool = True
    templates_dir: Optional[Path] = None


class Renderer:
    """Depth-first, read-only walk over the module producing AsciiDoc text.

    Packages, constants, variables, types, functions and methods are emitted
    in name order; struct fields keep their declaration order.
    """

    def __init__(self, options: RenderOptions | None = None) -> None:
        self.options = options or RenderOptions()
        if self.options.theme is not None and self.options.theme not in THEMES:
            raise RenderError(f"unknown theme {self.options.theme!r}")
        self._env = self._create_env(self.options.templates_dir)

    def render(self, module: Module) -> str:
        template = self._env.get_template("document.adoc.j2")
        return template.render(
            module=module,
            packages=module.sorted_packages(),
            options=self.options,
        )

    def render_docinfo(self) -> Optional[str]:
        """Stylesheet for ``docinfo.html``; ``None`` when no theme is selected."""
        if self.options.theme is None:
            return None
        template = self._env.get_template("docinfo.html.j2")
        return template.render(palette=THEMES[self.options.theme], roles=_ROLE_COLORS)

    def _create_env(self, templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(Path(__file__).with_name("templates")))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.globals.update(
            markup=markup,
            package_info=self.package_info,
            import_lines=self.import_lines,
            index_entries=self.index_entries,
            constant_lines=self.constant_lines,
            variable_blocks=self.variable_blocks,
            struct_lines=self.struct_lines,
        )
        env.filters["reflow"] = reflow
        env.filters["signature"] = render_signature
        return env

    def _display_path(self, import_path: str) -> str:
        return import_path.replace("/", self.options.package_separator)

    # -- package parts -----------------------------------------------------------

    def package_info(self, package: Package) -> str:
        lines = [markup.role(markup.INFO, markup.escape(self._display_path(package.import_path)))]
        if Stereotype.EXECUTABLE in package.stereotypes:
            lines.append(markup.role(markup.INFO, Stereotype.EXECUTABLE.value))
        return (markup.LINE_BREAK + "\n").join(lines)

    def import_lines(self, package: Package) -> List[str]:
        return [
            "{} {}".format(
                markup.role(markup.KEYWORD, "import"),
                markup.role(markup.STRING, markup.escape(f'"{self._display_path(path)}"')),
            )
            for path in package.imports
        ]

    def index_entries(self, package: Package) -> List[str]:
        """Bullet links to every function and method of ``package``."""
        entries: List[str] = []
        for struct in _by_name(package.structs.values()):
            for function in [*struct.constructors, *struct.methods]:
                entries.append(_index_entry(function))
        for function in _by_name(package.functions.values()):
            entries.append(_index_entry(function))
        return entries

    def constant_lines(self, package: Package) -> List[str]:
        lines: List[str] = []
        for constant in _by_name(package.consts.values()):
            lines.extend(_doc_lines(constant.doc))
            line = "{} {}{}".format(
                markup.role(markup.KEYWORD, "const"),
                markup.anchor(constant.ref_id.id()),
                markup.role(markup.CONSTANT, constant.name),
            )
            if constant.type_desc.raw:
                line += " " + render_type(constant.type_desc)
            if constant.value:
                line += " {} {}".format(
                    markup.role(markup.OPERATOR, "="),
                    markup.role(markup.STRING, markup.escape(constant.value)),
                )
            lines.append(_with_comment(line, constant.comment) + _line_end(constant.type_desc))
        return lines

    def variable_blocks(self, package: Package) -> Tuple[List[str], List[List[str]]]:
        """Undocumented variables share one block; documented ones get their own."""
        plain: List[str] = []
        documented: List[List[str]] = []
        for variable in _by_name(package.vars.values()):
            line = "{} {}{}".format(
                markup.role(markup.KEYWORD, "var"),
                markup.anchor(variable.ref_id.id()),
                markup.role(markup.VARIABLE, variable.name),
            )
            if variable.type_desc.raw:
                line += " " + render_type(variable.type_desc)
            line = _with_comment(line, variable.comment) + _line_end(variable.type_desc)
            if variable.doc.strip():
                documented.append([*_doc_lines(variable.doc), line])
            else:
                plain.append(line)
        return plain, documented

    # -- types -------------------------------------------------------------------

    def struct_lines(self, module: Module, struct: Struct) -> List[str]:
        opening = "{} {}{}{}".format(
            markup.role(markup.KEYWORD, "type"),
            markup.anchor(struct.ref_id.id()),
            markup.role(markup.NAME, struct.name),
            _generics(struct.generics),
        )
        if struct.kind not in ("struct", "interface"):
            if struct.underlying is not None:
                opening += " " + render_type(struct.underlying)
            return [opening + markup.LINE_BREAK]

        interface = struct.kind == "interface"
        lines = [
            "{} {} {}{}".format(
                opening,
                markup.role(markup.KEYWORD, struct.kind),
                markup.role(markup.OPERATOR, "{"),
                markup.LINE_BREAK,
            )
        ]
        if struct.fields:
            for member in struct.fields:
                lines.extend(self.render_field(module, member, interface=interface))
        else:
            notice = FILTERED_METHODS_NOTICE if interface else FILTERED_FIELDS_NOTICE
            lines.append(
                markup.role(markup.INFO, markup.indent(notice, _FIELD_INDENT)) + markup.LINE_BREAK
            )
        lines.append(markup.role(markup.OPERATOR, "}") + markup.LINE_BREAK)
        return lines

    def render_field(self, module: Module, member: Field, *, interface: bool = False) -> List[str]:
        """Lines for one struct field (or interface member), doc comment first."""
        lines = [markup.indent(line, _FIELD_INDENT) for line in _doc_lines(member.doc)]
        type_desc = member.type_desc
        if interface and member.name and type_desc.raw.startswith(_FUNC_PREFIX):
            body = markup.role(markup.NAME, member.name) + markup.escape(
                type_desc.raw[len(_FUNC_PREFIX) - 1 :]
            )
        elif member.name:
            body = "{}{} {}".format(
                markup.role(markup.VARIABLE, member.name),
                markup.padding(alignment_padding(module, member)),
                render_type(type_desc),
            )
        else:
            body = render_type(type_desc)
        line = markup.indent(_with_comment(body, member.comment), _FIELD_INDENT)
        lines.append(line + _line_end(type_desc))
        return lines



def render_type(type_desc: TypeDesc) -> str:
    """AsciiDoc for one resolved type occurrence."""
    if type_desc.origin is None:
        raise RenderError(f"type {type_desc.raw!r} was rendered before resolution")
    form = type_desc.form or parse_type_form(type_desc.raw)
    if not form.structured:
        return markup.role(markup.BUILTIN, markup.escape(type_desc.raw))

    prefix = "".join(
        markup.passthrough(facet) if facet in _PASSTHROUGH_FACETS else facet
        for facet in form.prefix
    )
    type_args = markup.escape(form.type_args) if form.type_args else ""

    if form.is_map:
        if type_desc.map_type is None:
            raise RenderError(f"map type {type_desc.raw!r} has no key/value description")
        return "{}{}{}{}{}{}".format(
            prefix,
            markup.role(markup.KEYWORD, "map"),
            markup.passthrough("["),
            render_type(type_desc.map_type.key),
            markup.passthrough("]"),
            render_type(type_desc.map_type.value),
        )

    origin = type_desc.origin
    if origin is TypeOrigin.BUILT_IN:
        return prefix + markup.role(markup.BUILTIN, form.identifier) + type_args
    if origin is TypeOrigin.LOCAL_CUSTOM:
        ref = _required_ref(type_desc)
        return prefix + markup.link(ref.id(), markup.role(markup.TYPE, form.identifier)) + type_args
    if origin is TypeOrigin.EXTERNAL_CUSTOM:
        ref = _required_ref(type_desc)
        package_ref = RefId.for_package(ref.import_path)
        return "{}{}.{}{}".format(
            prefix,
            markup.link(package_ref.id(), markup.role(markup.TYPE, form.qualifier or "")),
            markup.link(ref.id(), markup.role(markup.TYPE, form.identifier)),
            type_args,
        )
    if origin is TypeOrigin.EXTERNAL_NON_CUSTOM:
        return "{}{}.{}{}".format(
            prefix,
            markup.role(markup.TYPE, form.qualifier or ""),
            markup.role(markup.TYPE, form.identifier),
            type_args,
        )
    raise RenderError(f"unknown type origin {origin!r} for {type_desc.raw!r}")


def render_signature(function: Function) -> str:
    """Styled signature: receiver, name, generics, parameters and results."""
    head = markup.role(markup.KEYWORD, "func") + " "
    if isinstance(function, Method) and function.receiver is not None:
        head += "(" + _slot(function.receiver) + ") "
    head += markup.role(markup.NAME, function.name) + _generics(function.generics)
    params = ", ".join(_slot(p) for p in function.parameters.values())
    results = list(function.results.values())
    if not results:
        tail = ""
    elif len(results) == 1 and not results[0].name:
        tail = " " + render_type(results[0].type_desc)
    else:
        tail = " (" + ", ".join(_slot(r) for r in results) + ")"
    return f"{head}({params}){tail}"


def alignment_padding(module: Module, member: Field) -> int:
    """``{nbsp}`` units inserted after a field name so all type columns line up."""
    parent = module.struct_at(member.parent_struct)
    if parent is None or not member.name:
        return 0
    return parent.name_width() - len(member.name)


def _required_ref(type_desc: TypeDesc) -> RefId:
    if type_desc.ref_id is None:
        raise RenderError(
            f"{type_desc.origin.value if type_desc.origin else 'unresolved'} type "
            f"{type_desc.raw!r} has no reference id"
        )
    return type_desc.ref_id


def _index_entry(function: Function) -> str:
    label = function.signature or function.name
    return f"* {markup.link(function.ref_id.id(), markup.passthrough(label))}"


def _slot(member: Field) -> str:
    if member.name:
        return markup.role(markup.VARIABLE, member.name) + " " + render_type(member.type_desc)
    return render_type(member.type_desc)


def _generics(generics: List[Field]) -> str:
    if not generics:
        return ""
    body = ", ".join(
        markup.role(markup.NAME, g.name) + " " + render_type(g.type_desc) for g in generics
    )
    return markup.passthrough("[") + body + markup.passthrough("]")


def _with_comment(line: str, comment: str) -> str:
    text = comment.strip()
    if not text:
        return line
    flattened = " ".join(text.split())
    return line + " " + markup.role(markup.COMMENT, "// " + markup.escape_prose(flattened))


def _doc_lines(doc: str) -> List[str]:
    return [
        markup.role(markup.COMMENT, "// " + markup.escape_prose(line.strip())) + markup.LINE_BREAK
        for line in doc.strip().splitlines()
        if line.strip()
    ]


def _line_end(type_desc: TypeDesc) -> str:
    return markup.LINE_BREAK if type_desc.has_line_break else ""


def _by_name(items: Iterable) -> list:
    return sorted(items, key=lambda item: item.name)


__all__ = [
    "DOCINFO_FILENAME",
    "FILTERED_FIELDS_NOTICE",
    "FILTERED_METHODS_NOTICE",
    "RenderError",
    "RenderOptions",
    "Renderer",
    "THEMES",
    "alignment_padding",
    "render_signature",
    "render_type",
]
