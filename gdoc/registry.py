"""Cross-reference registry mapping declarations to anchors."""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from .models import Module, RefId


class CrossReferenceRegistry:
    """Knows every declaration that owns an anchor in the rendered document.

    Declaration sites emit ``anchor_id_of(ref)`` and usage sites emit
    ``link_target_of(ref)``; both come from the same hash, so links never
    depend on the order in which sections are laid out.
    """

    def __init__(self) -> None:
        self._refs: Dict[tuple[str, str], RefId] = {}
        self._local: Dict[str, Dict[str, RefId]] = {}
        self._package_names: Dict[str, str] = {}

    @classmethod
    def from_module(cls, module: Module) -> "CrossReferenceRegistry":
        registry = cls()
        for package in module.sorted_packages():
            registry.register_package(package.import_path, package.name)
            for constant in package.consts.values():
                registry.register(constant.ref_id)
            for variable in package.vars.values():
                registry.register(variable.ref_id)
            for struct in package.structs.values():
                registry.register(struct.ref_id)
                for constructor in struct.constructors:
                    registry.register(constructor.ref_id)
                for method in struct.methods:
                    registry.register(method.ref_id)
            for function in package.functions.values():
                registry.register(function.ref_id)
        return registry

    def register_package(self, import_path: str, name: str) -> RefId:
        self._package_names[import_path] = name
        self._local.setdefault(import_path, {})
        return self.register(RefId.for_package(import_path))

    def register(self, ref_id: RefId) -> RefId:
        key = (ref_id.import_path, ref_id.identifier)
        existing = self._refs.get(key)
        if existing is not None:
            return existing
        self._refs[key] = ref_id
        if not ref_id.is_package:
            self._local.setdefault(ref_id.import_path, {})[ref_id.identifier] = ref_id
        return ref_id

    def lookup(self, import_path: str, identifier: str) -> Optional[RefId]:
        return self._refs.get((import_path, identifier))

    def local(self, import_path: str) -> Mapping[str, RefId]:
        """Identifier index of one package, used for unqualified comment lookups."""
        return self._local.get(import_path, {})

    def package_ref(self, import_path: str) -> Optional[RefId]:
        return self.lookup(import_path, "")

    def package_name(self, import_path: str) -> Optional[str]:
        return self._package_names.get(import_path)

    def packages_matching(self, suffix: str) -> List[str]:
        """Import paths equal to ``suffix`` or ending with ``/suffix``, sorted."""
        if not suffix:
            return []
        tail = "/" + suffix
        return sorted(
            path for path in self._package_names if path == suffix or path.endswith(tail)
        )

    def __contains__(self, ref_id: object) -> bool:
        if not isinstance(ref_id, RefId):
            return False
        return (ref_id.import_path, ref_id.identifier) in self._refs

    def __len__(self) -> int:
        return len(self._refs)

    @staticmethod
    def anchor_id_of(ref_id: RefId) -> str:
        return ref_id.id()

    @staticmethod
    def link_target_of(ref_id: RefId) -> str:
        return ref_id.id()


__all__ = ["CrossReferenceRegistry"]
