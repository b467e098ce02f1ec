import importlib

mod = "jsonschemaeval"
class LazyLoader:
    """
    Lazy loader for the jsonschemaeval API to keep import time low.
    """
    def __init__(self, mappings):
        self._modules = {}
        self._mappings = mappings

    def _load_module(self, module_name):
        if module_name not in self._modules:
            self._modules[module_name] = importlib.import_module(module_name)
        return self._modules[module_name]

    def __getattr__(self, item):
        if item in self._mappings:
            module_name, attr_name = self._mappings[item]
            module = self._load_module(module_name)
            return getattr(module, attr_name)
        elif item.startswith('__'):
            raise AttributeError(item)
        else:
            return self._load_module(f"{mod}.{item}")

# Define the public names and their corresponding module paths
_mappings = {
    "JsonSchema": (f"{mod}.schema", "JsonSchema"),
    "load_schema": (f"{mod}.schema", "load_schema"),
    "SchemaSerializer": (f"{mod}.serializer", "SchemaSerializer"),
    "SchemaRegistry": (f"{mod}.registry", "SchemaRegistry"),
    "ValidationContext": (f"{mod}.context", "ValidationContext"),
    "EvaluatedState": (f"{mod}.context", "EvaluatedState"),
    "ValidationResult": (f"{mod}.results", "ValidationResult"),
    "ValidationOptions": (f"{mod}.options", "ValidationOptions"),
    "OutputFormat": (f"{mod}.options", "OutputFormat"),
    "SchemaVersion": (f"{mod}.versions", "SchemaVersion"),
    "SchemaVocabularies": (f"{mod}.versions", "SchemaVocabularies"),
    "Keyword": (f"{mod}.keyword", "Keyword"),
    "JsonSchemaError": (f"{mod}.errors", "JsonSchemaError"),
    "SchemaLoadError": (f"{mod}.errors", "SchemaLoadError"),
    "UninitializedKeywordError": (f"{mod}.errors", "UninitializedKeywordError"),
    "validate_instance": (f"{mod}.validate", "validate_instance"),
    "validate_file": (f"{mod}.validate", "validate_file"),
}

_lazy_loader = LazyLoader(_mappings)

def __getattr__(name):
    return getattr(_lazy_loader, name)
