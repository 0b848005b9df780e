import importlib

mod = "xml2ecl"
class LazyLoader:
    """
    Resolves the public xml2ecl entry points on first use, so the command line
    does not pay for the parser and the templates until it needs them.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def resolve(self, name):
        if name not in self._mappings:
            raise AttributeError(f"module {mod!r} has no attribute {name!r}")
        module_name, func_name = self._mappings[name]
        return getattr(self._load_module(module_name), func_name)

    def names(self):
        return list(self._mappings)

# Public entry point name -> (module path, function name)
_mappings = {
    "convert_xml_to_ecl": (f"{mod}.xmltoecl", "convert_xml_to_ecl"),
    "infer_ecl_from_xml": (f"{mod}.xmltoecl", "infer_ecl_from_xml"),
    "emit_ecl": (f"{mod}.eclemitter", "emit_ecl"),
    "build_schema_tree": (f"{mod}.treebuilder", "build_schema_tree"),
}

_lazy_loader = LazyLoader(_mappings)

__all__ = _lazy_loader.names()

def __getattr__(name):
    return _lazy_loader.resolve(name)

def __dir__():
    return sorted(set(globals()) | set(__all__))
