"""C# source host."""

from fieldinject.hosts.csharp.document import CSharpDocument

__all__ = ["CSharpDocument"]
