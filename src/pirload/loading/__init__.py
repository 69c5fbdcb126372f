"""Entry buffer allocation and loading."""

from pirload.loading.buffer import BufferLoader, EntryBuffer, LoadReport

__all__ = ["BufferLoader", "EntryBuffer", "LoadReport"]
