"""Host documents the injection core runs against."""

from pathlib import Path
from typing import Optional, Union

from fieldinject.core.options import InjectionOptions
from fieldinject.hosts.csharp import CSharpDocument
from fieldinject.hosts.python_host import PythonDocument

Document = Union[CSharpDocument, PythonDocument]

DOCUMENT_TYPES = {
    ".cs": CSharpDocument,
    ".py": PythonDocument,
}


def document_type_for(file_path: Path) -> type:
    """Return the document class handling a file's language.

    Raises:
        ValueError: If the file extension is not supported
    """
    suffix = file_path.suffix.lower()
    if suffix not in DOCUMENT_TYPES:
        supported = ", ".join(sorted(DOCUMENT_TYPES))
        raise ValueError(f"Unsupported file type '{suffix}' for {file_path}. Supported: {supported}")
    return DOCUMENT_TYPES[suffix]


def open_document(file_path: Path, options: Optional[InjectionOptions] = None) -> Document:
    """Load a source file into the matching host document.

    Args:
        file_path: Path to a .cs or .py file
        options: Run settings passed to the document

    Raises:
        ValueError: If the file extension is not supported
    """
    document_class = document_type_for(file_path)
    # newline="" keeps CRLF line endings intact
    with file_path.open(encoding="utf-8", newline="") as source:
        text = source.read()
    return document_class(text, options)
