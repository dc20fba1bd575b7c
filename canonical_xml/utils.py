import importlib.util
from pathlib import Path

from canonical_xml.types import Tokenizer


def load_class(script: str, class_name: str):
    spec = importlib.util.spec_from_file_location(Path(script).stem, script)
    assert spec and spec.loader, f"Cannot load {script}"
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return getattr(module, class_name)


def load_tokenizer(script: str, class_name: str = "Tokenizer") -> Tokenizer:
    tokenizer_class = load_class(script, class_name)
    tokenizer = tokenizer_class()
    assert hasattr(tokenizer, "iter_tokens"), f"{script}:{class_name} has no iter_tokens"
    return tokenizer
