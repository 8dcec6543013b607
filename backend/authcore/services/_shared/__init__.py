"""Cross-cutting service primitives: errors, base class, ports."""
