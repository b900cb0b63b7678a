"""Host adapters that display synbuf buffers."""
